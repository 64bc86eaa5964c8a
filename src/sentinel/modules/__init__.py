"""Feature modules with auto-discovery."""

from importlib import import_module
from pathlib import Path

import structlog
from fastapi import APIRouter


logger = structlog.get_logger()


def discover_modules() -> list[APIRouter]:
    """Auto-discover and return routers from all modules.

    A module takes part when its ``__init__`` exposes a ``router``. Its
    ``register_routes`` hook, if any, runs first so the route handlers are
    attached before the router is mounted.

    Returns:
        List of FastAPI routers from discovered modules.
    """
    modules_dir = Path(__file__).parent
    routers: list[APIRouter] = []

    for path in sorted(modules_dir.iterdir()):
        if not path.is_dir() or path.name.startswith("_"):
            continue
        module = import_module(f"sentinel.modules.{path.name}")
        if not hasattr(module, "router"):
            continue
        register = getattr(module, "register_routes", None)
        if register is not None:
            register()
        routers.append(module.router)
        logger.debug("module_loaded", module=path.name)

    return routers
