"""Pydantic schemas package."""
from src.schemas.common import HealthResponse
from src.schemas.permissions import (
    EditRequest,
    ModuleDefinitionResponse,
    ModulePermissionResponse,
    PermissionMatrixPayload,
    PermissionRowSchema,
    ScopeOptionResponse,
    ScopePermissionsResponse,
    StaffPermissionsResponse,
)

__all__ = [
    "EditRequest",
    "HealthResponse",
    "ModuleDefinitionResponse",
    "ModulePermissionResponse",
    "PermissionMatrixPayload",
    "PermissionRowSchema",
    "ScopeOptionResponse",
    "ScopePermissionsResponse",
    "StaffPermissionsResponse",
]
