# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Staff permission schemas."""
import uuid
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from src.permissions import (
    ApplyPreset,
    EditCommand,
    Module,
    PermissionBit,
    Preset,
    Role,
    SetAll,
    SetBit,
    SetColumn,
    SetModule,
)


class PermissionRowSchema(BaseModel):
    """Four CRUD bits of one module; omitted bits default to False."""

    view: bool = False
    add: bool = False
    edit: bool = False
    delete: bool = False


# scope id -> module -> bits, the persisted wire shape
PermissionMatrixPayload = dict[str, dict[Module, PermissionRowSchema]]


class StaffPermissionsResponse(BaseModel):
    """Full permission matrix of a staff member."""

    staff_id: uuid.UUID
    permissions: PermissionMatrixPayload


class ModuleDefinitionResponse(BaseModel):
    """Module catalogue entry."""

    key: Module
    label: str
    parents: list[Module]


class ScopeOptionResponse(BaseModel):
    """Selectable scope (building) for the permission editor."""

    value: str
    label: str


class ModulePermissionResponse(PermissionRowSchema):
    """One module row of a scope, with its role classification."""

    module: Module
    label: str
    role: Role
    role_label: str


class ScopePermissionsResponse(BaseModel):
    """One scope of a staff member's matrix, ready for display."""

    staff_id: uuid.UUID
    scope_id: str
    scope_label: str
    modules: list[ModulePermissionResponse]
    columns: dict[PermissionBit, bool]
    all_checked: bool


class SetBitRequest(BaseModel):
    """Toggle one bit of one module."""

    op: Literal["set_bit"]
    module: Module
    bit: PermissionBit
    value: bool

    def to_command(self) -> EditCommand:
        return SetBit(self.module, self.bit, self.value)


class SetModuleRequest(BaseModel):
    """Toggle all bits of one module."""

    op: Literal["set_module"]
    module: Module
    value: bool

    def to_command(self) -> EditCommand:
        return SetModule(self.module, self.value)


class SetColumnRequest(BaseModel):
    """Toggle one bit across all modules."""

    op: Literal["set_column"]
    bit: PermissionBit
    value: bool

    def to_command(self) -> EditCommand:
        return SetColumn(self.bit, self.value)


class SetAllRequest(BaseModel):
    """Toggle every bit of every module."""

    op: Literal["set_all"]
    value: bool

    def to_command(self) -> EditCommand:
        return SetAll(self.value)


class ApplyPresetRequest(BaseModel):
    """Apply a named preset."""

    op: Literal["apply_preset"]
    preset: Preset

    def to_command(self) -> EditCommand:
        return ApplyPreset(self.preset)


EditRequest = Annotated[
    SetBitRequest | SetModuleRequest | SetColumnRequest | SetAllRequest | ApplyPresetRequest,
    Field(discriminator="op"),
]
