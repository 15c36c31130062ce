"""
Core application utilities for settings, logging, security and FastAPI dependencies.

This package provides:
- Application-level settings (separate from DB settings)
- Structured logging with correlation and tenant context
- Domain errors translated to HTTP responses by the API layer
- Dependency helpers (tenant extraction, authenticated principal, unit of work)
"""
