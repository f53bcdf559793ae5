"""Services module.

This module provides the service layer architecture:
- exceptions: Base service exceptions
- identifiers: Counter-backed sequential IDs and random opaque IDs
"""
