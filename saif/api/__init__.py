"""
HTTP API layer - FastAPI routes and dependencies.
"""
