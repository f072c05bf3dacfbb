"""
Rendering Module
===============

Browser automation for HTML to image conversion.

Components:
- engine: shared Chromium handle and per-request render surfaces
- validator: request validation into render options
- pipeline: surface acquisition, content load, capture and teardown
- lifecycle: startup and shutdown of the shared engine
"""
