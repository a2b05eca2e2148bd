"""FastAPI dependencies shared by page and API routes."""

from fastapi import Request

from inkwell.storage.backends.base import StorageBackend


def get_backend(request: Request) -> StorageBackend:
    """Storage backend the application was built with."""
    return request.app.state.backend
