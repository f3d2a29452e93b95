"""
Core domain models, contracts, and errors.

This module contains the foundational building blocks that are independent
of external systems (broker exports, file formats, CLI).
"""
