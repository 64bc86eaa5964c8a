"""Accounts module - registration, email verification and sign-in."""

from fastapi import APIRouter


router = APIRouter(prefix="/account", tags=["account"])


# Module metadata
__module__ = {
    "name": "accounts",
    "version": "1.0.0",
    "description": "Self-service registration and email verification",
    "dependencies": ["tenants", "users", "verification"],
}


def register_routes() -> None:
    """Register routes - called after all imports are complete."""
    from sentinel.modules.accounts import routes  # noqa: F401
