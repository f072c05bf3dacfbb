"""
API Routes
==========

Routers for conversion and general service endpoints.
"""
