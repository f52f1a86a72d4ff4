# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Edit operations, presets and role classification on a scope matrix.

Every mutating operation performs its raw change and then normalizes the
scope, so callers never observe a scope that violates the closure
invariants. ``apply_edit`` is the functional entry point: it takes a
matrix and a command and returns a new matrix without touching its input.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from src.permissions.exceptions import UnknownPresetError
from src.permissions.graph import DEPENDENCY_GRAPH, DependencyGraph
from src.permissions.matrix import (
    PermissionMatrix,
    PermissionRow,
    ScopeMatrix,
    copy_matrix,
    ensure_scope,
    normalize,
)
from src.permissions.modules import (
    ALL_MODULES,
    MODULE_LABELS,
    Module,
    PermissionBit,
    parse_bit,
    parse_module,
)

logger = logging.getLogger(__name__)


class Preset(str, Enum):
    """Named bulk assignment applied to every module of a scope."""

    READ_ONLY = "read_only"
    MANAGER = "manager"
    ADMIN = "admin"


class Role(str, Enum):
    """Classification of a single module row."""

    NONE = "none"
    ADMIN = "admin"
    MANAGER = "manager"
    READ_ONLY = "read_only"
    CUSTOM = "custom"

    @property
    def label(self) -> str:
        return ROLE_LABELS[self]


ROLE_LABELS: dict[Role, str] = {
    Role.NONE: "None",
    Role.ADMIN: "Admin",
    Role.MANAGER: "Manager",
    Role.READ_ONLY: "Read-only",
    Role.CUSTOM: "Custom",
}

PRESET_ROWS: dict[Preset, PermissionRow] = {
    Preset.READ_ONLY: PermissionRow(view=True),
    Preset.MANAGER: PermissionRow(view=True, add=True, edit=True),
    Preset.ADMIN: PermissionRow.uniform(True),
}


def parse_preset(value: Preset | str) -> Preset:
    try:
        return Preset(value)
    except ValueError as e:
        raise UnknownPresetError(f"Unknown preset: {value!r}") from e


def _clear_descendants(
    scope: ScopeMatrix, module: Module, graph: DependencyGraph
) -> None:
    for descendant in graph.descendants_of(module):
        scope[descendant].clear()


def set_bit(
    scope: ScopeMatrix,
    module: Module | str,
    bit: PermissionBit | str,
    value: bool,
    graph: DependencyGraph = DEPENDENCY_GRAPH,
) -> ScopeMatrix:
    """Set one bit on one module.

    Revoking ``view`` also clears every descendant, so the revocation is
    not undone by the upward pass re-granting it for a descendant.
    """
    module = parse_module(module)
    bit = parse_bit(bit)
    setattr(scope[module], bit.value, value)
    if not value and bit is PermissionBit.VIEW:
        _clear_descendants(scope, module, graph)
    return normalize(scope, graph)


def set_all_bits_for_module(
    scope: ScopeMatrix,
    module: Module | str,
    value: bool,
    graph: DependencyGraph = DEPENDENCY_GRAPH,
) -> ScopeMatrix:
    """Set all four bits of one module; clearing cascades to descendants."""
    module = parse_module(module)
    scope[module].set_all(value)
    if not value:
        _clear_descendants(scope, module, graph)
    return normalize(scope, graph)


def set_bit_across_modules(
    scope: ScopeMatrix,
    bit: PermissionBit | str,
    value: bool,
    graph: DependencyGraph = DEPENDENCY_GRAPH,
) -> ScopeMatrix:
    """Set one bit on every module.

    Revoking ``view`` everywhere leaves no module reachable, so the whole
    scope is cleared starting from every root of the graph.
    """
    bit = parse_bit(bit)
    for module in graph.modules:
        setattr(scope[module], bit.value, value)
    if not value and bit is PermissionBit.VIEW:
        for root in graph.roots():
            scope[root].clear()
            _clear_descendants(scope, root, graph)
    return normalize(scope, graph)


def set_all_bits_across_modules(
    scope: ScopeMatrix,
    value: bool,
    graph: DependencyGraph = DEPENDENCY_GRAPH,
) -> ScopeMatrix:
    """Set every bit of every module ("Admin (all)" when value is True)."""
    for module in graph.modules:
        scope[module].set_all(value)
    return normalize(scope, graph)


def apply_preset(
    scope: ScopeMatrix,
    preset: Preset | str,
    graph: DependencyGraph = DEPENDENCY_GRAPH,
) -> ScopeMatrix:
    """Overwrite every module row with the preset's bits."""
    template = PRESET_ROWS[parse_preset(preset)]
    for module in graph.modules:
        scope[module] = PermissionRow(**template.to_dict())
    return normalize(scope, graph)


def classify(row: PermissionRow | None) -> Role:
    """Classify a module row as one of the named roles."""
    if row is None:
        return Role.NONE
    v, a, e, d = row.view, row.add, row.edit, row.delete
    if not (v or a or e or d):
        return Role.NONE
    if v and a and e and d:
        return Role.ADMIN
    if v and a and e and not d:
        return Role.MANAGER
    if v and not (a or e or d):
        return Role.READ_ONLY
    return Role.CUSTOM


def is_module_all_checked(scope: ScopeMatrix, module: Module | str) -> bool:
    row = scope.get(parse_module(module))
    return row is not None and row.view and row.add and row.edit and row.delete


def is_column_all_checked(scope: ScopeMatrix, bit: PermissionBit | str) -> bool:
    bit = parse_bit(bit)
    return all(
        module in scope and getattr(scope[module], bit.value)
        for module in ALL_MODULES
    )


def is_scope_all_checked(scope: ScopeMatrix) -> bool:
    return all(is_module_all_checked(scope, module) for module in ALL_MODULES)


def filter_modules(term: str | None) -> list[Module]:
    """Modules whose label contains the search term (case-insensitive)."""
    needle = (term or "").strip().lower()
    if not needle:
        return list(ALL_MODULES)
    return [m for m in ALL_MODULES if needle in MODULE_LABELS[m].lower()]


# --- Commands ---


@dataclass(frozen=True)
class SetBit:
    """Toggle one bit of one module."""

    module: Module
    bit: PermissionBit
    value: bool

    def apply(self, scope: ScopeMatrix, graph: DependencyGraph) -> ScopeMatrix:
        return set_bit(scope, self.module, self.bit, self.value, graph)


@dataclass(frozen=True)
class SetModule:
    """Toggle all bits of one module."""

    module: Module
    value: bool

    def apply(self, scope: ScopeMatrix, graph: DependencyGraph) -> ScopeMatrix:
        return set_all_bits_for_module(scope, self.module, self.value, graph)


@dataclass(frozen=True)
class SetColumn:
    """Toggle one bit across every module."""

    bit: PermissionBit
    value: bool

    def apply(self, scope: ScopeMatrix, graph: DependencyGraph) -> ScopeMatrix:
        return set_bit_across_modules(scope, self.bit, self.value, graph)


@dataclass(frozen=True)
class SetAll:
    """Toggle every bit of every module."""

    value: bool

    def apply(self, scope: ScopeMatrix, graph: DependencyGraph) -> ScopeMatrix:
        return set_all_bits_across_modules(scope, self.value, graph)


@dataclass(frozen=True)
class ApplyPreset:
    """Apply a named preset to every module."""

    preset: Preset

    def apply(self, scope: ScopeMatrix, graph: DependencyGraph) -> ScopeMatrix:
        return apply_preset(scope, self.preset, graph)


EditCommand = SetBit | SetModule | SetColumn | SetAll | ApplyPreset


def apply_edit(
    matrix: PermissionMatrix,
    scope_id: str | int,
    command: EditCommand,
    graph: DependencyGraph = DEPENDENCY_GRAPH,
) -> PermissionMatrix:
    """Apply one command to one scope and return the updated matrix.

    The input matrix is left untouched; the scope is created lazily in
    the returned copy when it did not exist yet.
    """
    updated = copy_matrix(matrix)
    scope = ensure_scope(updated, scope_id, graph.modules)
    command.apply(scope, graph)
    logger.debug(f"Applied {command!r} to scope {scope_id}")
    return updated


def scope_roles(scope: ScopeMatrix) -> dict[Module, Role]:
    return {module: classify(scope.get(module)) for module in ALL_MODULES}

