"""
Pydantic schema definitions for API payloads.

Each domain (users, authors, books) defines its own models for request
and response bodies.  Schemas are separated from the stored documents
to decouple the API representation from persistence.
"""
