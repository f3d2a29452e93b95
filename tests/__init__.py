"""
Test suite for annual-tax-report

Contains:
- tests/unit/          : Unit tests for individual modules
"""
