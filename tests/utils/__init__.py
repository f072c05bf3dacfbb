"""
Test Utilities
==============

Fake engine and surfaces for exercising the conversion pipeline.
"""
