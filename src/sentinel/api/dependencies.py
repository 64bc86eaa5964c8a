"""Shared API dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from sentinel.core.database import get_db


# Per-request transaction handle passed explicitly into every repository
DBSession = Annotated[AsyncSession, Depends(get_db)]
