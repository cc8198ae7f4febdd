"""Dependency that hands routes the application's Repository."""

from fastapi import Request

from backend.app.services.repository import Repository


def get_repository(request: Request) -> Repository:
    # Set by the lifespan handler, or passed to create_app
    repository = getattr(request.app.state, "repository", None)
    if repository is None:
        raise RuntimeError("Repository not configured; run the app through its lifespan")
    return repository
