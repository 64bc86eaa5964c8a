"""Tenants module - isolation boundaries and their administration."""

from fastapi import APIRouter


router = APIRouter(prefix="/tenants", tags=["tenants"])


# Module metadata
__module__ = {
    "name": "tenants",
    "version": "1.0.0",
    "description": "Tenant administration",
    "dependencies": [],
}


def register_routes() -> None:
    """Register routes - called after all imports are complete."""
    from sentinel.modules.tenants import routes  # noqa: F401
