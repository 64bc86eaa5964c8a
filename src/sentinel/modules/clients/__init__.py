"""Clients module - OAuth application registration."""

from fastapi import APIRouter


router = APIRouter(prefix="/clients", tags=["clients"])


# Module metadata
__module__ = {
    "name": "clients",
    "version": "1.0.0",
    "description": "OAuth client administration",
    "dependencies": ["tenants"],
}


def register_routes() -> None:
    """Register routes - called after all imports are complete."""
    from sentinel.modules.clients import routes  # noqa: F401
