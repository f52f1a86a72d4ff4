# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Loading, editing and saving staff permission matrices."""

import json
import logging
import uuid
from typing import Any

from sqlalchemy.orm import Session

from src.events import AppEvent, event_bus
from src.models import StaffMember
from src.permissions import (
    ALL_MODULES,
    DEPENDENCY_GRAPH,
    MODULE_LABELS,
    PERMISSION_BITS,
    EditCommand,
    PermissionMatrix,
    apply_edit,
    ensure_scope,
    matrix_from_dict,
    matrix_to_dict,
    normalize_matrix,
)
from src.permissions.matrix import copy_matrix, scope_key
from src.permissions.operations import (
    classify,
    filter_modules,
    is_column_all_checked,
    is_scope_all_checked,
)

logger = logging.getLogger(__name__)


class StaffPermissionServiceError(Exception):
    """Base exception for staff permission service errors."""


class StaffNotFoundError(StaffPermissionServiceError):
    """Staff member does not exist."""


def get_staff(db: Session, staff_id: uuid.UUID) -> StaffMember | None:
    """Get a staff member by ID."""
    return db.query(StaffMember).filter(StaffMember.id == staff_id).first()


def require_staff(db: Session, staff_id: uuid.UUID) -> StaffMember:
    """Get a staff member by ID or raise StaffNotFoundError."""
    staff = get_staff(db, staff_id)
    if not staff:
        raise StaffNotFoundError(f"Staff member {staff_id} not found")
    return staff


def get_permission_matrix(staff: StaffMember) -> PermissionMatrix:
    """Decode the stored matrix; a staff member without one has no grants."""
    if not staff.permissions:
        return {}
    return matrix_from_dict(json.loads(staff.permissions))


def save_permission_matrix(
    db: Session,
    staff: StaffMember,
    matrix: PermissionMatrix,
    event: AppEvent = AppEvent.STAFF_PERMISSIONS_REPLACED,
    scope_id: str | None = None,
) -> PermissionMatrix:
    """Normalize every scope and store the matrix as one unit.

    The whole matrix is written, so concurrent editors resolve as
    last-write-wins.
    """
    matrix = normalize_matrix(copy_matrix(matrix))
    payload = matrix_to_dict(matrix)
    staff.permissions = json.dumps(payload)
    db.commit()
    db.refresh(staff)
    logger.info(
        f"Saved permissions for staff {staff.id} ({len(payload)} scope(s))"
    )

    event_bus.publish(
        event,
        {"staff_id": str(staff.id), "scope_id": scope_id, "permissions": payload},
    )
    return matrix


def apply_staff_edit(
    db: Session,
    staff: StaffMember,
    scope_id: str | int,
    command: EditCommand,
) -> PermissionMatrix:
    """Apply one edit command to one scope of a staff member and save it."""
    matrix = apply_edit(get_permission_matrix(staff), scope_id, command)
    return save_permission_matrix(
        db,
        staff,
        matrix,
        event=AppEvent.STAFF_PERMISSIONS_UPDATED,
        scope_id=scope_key(scope_id),
    )


def describe_scope(
    matrix: PermissionMatrix,
    scope_id: str | int,
    search: str | None = None,
) -> dict[str, Any]:
    """Build the display form of one scope without persisting it.

    An untouched scope is shown with every module all-false.
    """
    scope = ensure_scope(copy_matrix(matrix), scope_id)
    modules = filter_modules(search)
    return {
        "scope_id": scope_key(scope_id),
        "modules": [
            {
                "module": module,
                "label": MODULE_LABELS[module],
                **scope[module].to_dict(),
                "role": classify(scope[module]),
                "role_label": classify(scope[module]).label,
            }
            for module in modules
        ],
        "columns": {bit: is_column_all_checked(scope, bit) for bit in PERMISSION_BITS},
        "all_checked": is_scope_all_checked(scope),
    }


def module_catalogue() -> list[dict[str, Any]]:
    """Modules with labels and direct dependencies, in canonical order."""
    return [
        {
            "key": module,
            "label": MODULE_LABELS[module],
            "parents": list(DEPENDENCY_GRAPH.parents_of(module)),
        }
        for module in ALL_MODULES
    ]
