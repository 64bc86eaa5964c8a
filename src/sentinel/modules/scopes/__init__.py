"""Scopes module - permission names, global or per tenant."""

from fastapi import APIRouter


router = APIRouter(prefix="/scopes", tags=["scopes"])


# Module metadata
__module__ = {
    "name": "scopes",
    "version": "1.0.0",
    "description": "Scope administration",
    "dependencies": ["tenants", "clients"],
}


def register_routes() -> None:
    """Register routes - called after all imports are complete."""
    from sentinel.modules.scopes import routes  # noqa: F401
