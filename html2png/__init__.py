"""
HTML to PNG Service
===================

A small HTTP service that renders raw HTML markup into PNG or JPEG images
using a shared headless Chromium instance driven by Playwright.

This package provides:
- FastAPI endpoints for JSON and multipart conversion requests
- Request validation into immutable render options
- A conversion pipeline that owns one isolated browser surface per request
- Lifecycle management for the shared browser process
"""

__version__ = "1.0.0"
__author__ = "HTML to PNG Team"
