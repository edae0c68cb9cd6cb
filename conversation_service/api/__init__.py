"""
API module.

FastAPI application factory, routers and dependencies for the HTTP boundary.
"""
