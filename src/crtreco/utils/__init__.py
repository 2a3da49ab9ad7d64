"""Utility functions shared across the CRT reconstruction package.

This includes:
- `logger.py` which defines the package logger
- `enums.py` which enumerates the roles a CRT tagger can play
"""
