"""Utility module for Img2FTPS.

This module provides cross-cutting utilities:
- Logging: Configured logging with credential redaction
- Validators: Input validation for hosts, ports, paths and names
- Signatures: Image magic-byte validation
"""
