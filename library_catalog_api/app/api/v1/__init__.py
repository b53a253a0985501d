"""
Version 1 of the Library Catalog API.

Breaking changes should be introduced in a new version subpackage
(e.g. ``v2``) to preserve backwards compatibility.
"""
