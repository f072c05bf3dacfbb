"""
Core Business Logic
===================

Rendering engine management and the HTML to image conversion pipeline.
"""
