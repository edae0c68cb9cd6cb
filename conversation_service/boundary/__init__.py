"""
Boundary layer for external system integrations.

Handles all interactions with the persistent store. Provides the ORM
models, CRUD adapters and connection management the services build on.
"""
