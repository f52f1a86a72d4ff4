# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Staff permission matrix API endpoints."""

import logging

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from src.api.deps import get_building_directory, get_db, get_staff_member
from src.models import StaffMember
from src.permissions import PermissionMatrix, matrix_from_dict, matrix_to_dict
from src.schemas.permissions import (
    EditRequest,
    ModuleDefinitionResponse,
    PermissionMatrixPayload,
    ScopeOptionResponse,
    ScopePermissionsResponse,
    StaffPermissionsResponse,
)
from src.services import staff_permission_service
from src.services.building_directory import BuildingDirectory, BuildingDirectoryError

logger = logging.getLogger(__name__)

router = APIRouter()


def _payload_to_matrix(payload: PermissionMatrixPayload) -> PermissionMatrix:
    return matrix_from_dict(
        {
            scope_id: {module.value: row.model_dump() for module, row in scope.items()}
            for scope_id, scope in payload.items()
        }
    )


async def _scope_response(
    staff: StaffMember,
    matrix: PermissionMatrix,
    scope_id: str,
    directory: BuildingDirectory,
    search: str | None = None,
    saved: bool = False,
) -> ScopePermissionsResponse:
    try:
        label = await directory.get_label(scope_id)
    except BuildingDirectoryError as e:
        if not saved:
            raise HTTPException(
                status_code=503,
                detail=f"Building directory unavailable: {e}",
            ) from e
        # edit already stored; label falls back to the raw id
        logger.warning(f"Building directory lookup failed for scope {scope_id}: {e}")
        label = scope_id
    described = staff_permission_service.describe_scope(matrix, scope_id, search)
    return ScopePermissionsResponse(staff_id=staff.id, scope_label=label, **described)


@router.get(
    "/permissions/modules",
    response_model=list[ModuleDefinitionResponse],
    summary="List permission modules",
)
def list_modules():
    """Retrieve all resource modules with their labels and direct dependencies."""
    return staff_permission_service.module_catalogue()


@router.get(
    "/permissions/scopes",
    response_model=list[ScopeOptionResponse],
    summary="List selectable building scopes",
)
async def list_scopes(
    directory: BuildingDirectory = Depends(get_building_directory),
) -> list[ScopeOptionResponse]:
    """Retrieve the buildings a permission matrix can be scoped to."""
    try:
        buildings = await directory.list_buildings()
    except BuildingDirectoryError as e:
        raise HTTPException(
            status_code=503,
            detail=f"Building directory unavailable: {e}",
        ) from e
    return [ScopeOptionResponse(value=b.value, label=b.label) for b in buildings]


@router.get(
    "/staff/{staff_id}/permissions",
    response_model=StaffPermissionsResponse,
    summary="Get a staff member's permission matrix",
)
def get_permissions(staff: StaffMember = Depends(get_staff_member)):
    """Retrieve the full per-building permission matrix of a staff member."""
    matrix = staff_permission_service.get_permission_matrix(staff)
    return StaffPermissionsResponse(staff_id=staff.id, permissions=matrix_to_dict(matrix))


@router.put(
    "/staff/{staff_id}/permissions",
    response_model=StaffPermissionsResponse,
    summary="Replace a staff member's permission matrix",
)
def replace_permissions(
    payload: PermissionMatrixPayload = Body(...),
    staff: StaffMember = Depends(get_staff_member),
    db: Session = Depends(get_db),
):
    """Store a complete matrix. Every scope is normalized before saving."""
    matrix = staff_permission_service.save_permission_matrix(
        db, staff, _payload_to_matrix(payload)
    )
    return StaffPermissionsResponse(staff_id=staff.id, permissions=matrix_to_dict(matrix))


@router.get(
    "/staff/{staff_id}/permissions/{scope_id}",
    response_model=ScopePermissionsResponse,
    summary="Get one building scope of a staff member's permissions",
)
async def get_scope_permissions(
    scope_id: str,
    search: str | None = Query(None, description="Filter modules by label"),
    staff: StaffMember = Depends(get_staff_member),
    directory: BuildingDirectory = Depends(get_building_directory),
) -> ScopePermissionsResponse:
    """Retrieve one scope with role labels. Untouched scopes are all-false."""
    matrix = staff_permission_service.get_permission_matrix(staff)
    return await _scope_response(staff, matrix, scope_id, directory, search)


@router.post(
    "/staff/{staff_id}/permissions/{scope_id}/edits",
    response_model=ScopePermissionsResponse,
    summary="Apply an edit to one building scope",
)
async def edit_scope_permissions(
    scope_id: str,
    edit: EditRequest = Body(...),
    staff: StaffMember = Depends(get_staff_member),
    db: Session = Depends(get_db),
    directory: BuildingDirectory = Depends(get_building_directory),
) -> ScopePermissionsResponse:
    """Apply a toggle or preset, normalize the scope and save the matrix."""
    matrix = staff_permission_service.apply_staff_edit(
        db, staff, scope_id, edit.to_command()
    )
    return await _scope_response(staff, matrix, scope_id, directory, saved=True)
