"""API layer - FastAPI gateway, request/response schemas and service."""
