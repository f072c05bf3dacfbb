"""
Test Suite
==========

Test suite matching the html2png/ package structure.

Test Categories:
- unit: Unit tests for individual components
- integration: HTTP API tests against a fake rendering engine
- e2e: Round trips through a real headless Chromium, skipped when unavailable
"""
