"""
Content service for the Reflective Sessions site.

This package provides a FastAPI application with a store abstraction and the
resolvers that serve site content, group offerings and blog posts, falling
back to bundled data when the database cannot be reached.
"""
