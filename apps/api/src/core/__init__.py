"""Core application components.

This module provides the foundational components for the Voluntarily API:
- Database connection management via Prisma
- Application settings and configuration
- Logging setup shared across domains
"""
