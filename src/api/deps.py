# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""API dependencies for dependency injection."""

import uuid
from collections.abc import AsyncGenerator, Generator

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.config import Settings, get_settings
from src.database import SessionLocal
from src.models import StaffMember
from src.services import staff_permission_service
from src.services.building_directory import (
    BuildingDirectory,
    DatabaseBuildingDirectory,
    HttpBuildingDirectory,
)


def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_staff_member(
    staff_id: uuid.UUID,
    db: Session = Depends(get_db),
) -> StaffMember:
    """Resolve the staff member addressed by the path or fail with 404."""
    try:
        return staff_permission_service.require_staff(db, staff_id)
    except staff_permission_service.StaffNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Staff member not found",
        ) from e


async def get_building_directory(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AsyncGenerator[BuildingDirectory, None]:
    """Remote directory when configured, local buildings table otherwise."""
    if settings.BUILDING_DIRECTORY_URL:
        directory: BuildingDirectory = HttpBuildingDirectory(
            settings.BUILDING_DIRECTORY_URL,
            token=settings.BUILDING_DIRECTORY_TOKEN,
            timeout=settings.BUILDING_DIRECTORY_TIMEOUT,
            page_size=settings.BUILDING_DIRECTORY_PAGE_SIZE,
        )
    else:
        directory = DatabaseBuildingDirectory(db)
    try:
        yield directory
    finally:
        await directory.close()
