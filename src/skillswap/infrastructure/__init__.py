"""Infrastructure layer — SQLite store, schema, and atomic row updates.

This layer depends on stdlib, SQLAlchemy, and the domain error types.
It must never import from services, commands, or output.
"""
