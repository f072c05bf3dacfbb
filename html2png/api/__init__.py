"""
FastAPI REST Endpoints
======================

REST API endpoints for HTTP access to HTML conversion.

Endpoints:
- POST /convert: JSON body conversion
- POST /convert-form: multipart or form field conversion
- GET /health: Health check endpoint
- GET /: Service information and usage example
"""
