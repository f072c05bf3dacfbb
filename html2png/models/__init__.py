"""
Data Models
===========

Pydantic data models for conversion requests, render options and outcomes.

Models:
- schemas: render options, conversion outcomes and API response schemas
"""
