"""
Application package initializer.

The catalog is organised into a few small layers: ``core`` holds
configuration, logging, persistence and security primitives,
``services`` holds the business rules for users, authors and books,
``schemas`` defines the pydantic payloads and ``api`` exposes the
versioned HTTP routes.
"""

from .main import app  # noqa: F401
