"""Shared utilities and cross-domain components.

This module contains utilities used across multiple domains:
- Exception classes for consistent error handling
- Ability engine for attribute-based access control
- In-process domain event bus
"""
