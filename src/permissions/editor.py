# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Host-side editing session over a staff member's permission matrix."""

import logging
from collections.abc import Callable

from src.permissions.exceptions import NoScopeSelectedError
from src.permissions.graph import DEPENDENCY_GRAPH, DependencyGraph
from src.permissions.matrix import (
    PermissionMatrix,
    ScopeMatrix,
    copy_matrix,
    ensure_scope,
    scope_key,
)
from src.permissions.modules import Module, PermissionBit, parse_bit, parse_module
from src.permissions.operations import (
    ApplyPreset,
    EditCommand,
    Preset,
    Role,
    SetAll,
    SetBit,
    SetColumn,
    SetModule,
    apply_edit,
    parse_preset,
    scope_roles,
)

logger = logging.getLogger(__name__)

# Type alias for change callbacks
ChangeHandler = Callable[[PermissionMatrix], None]


class PermissionEditor:
    """Owns a permission matrix and the currently selected scope.

    Each dispatched command replaces the held matrix with the normalized
    result and then calls ``on_change`` exactly once with the full matrix,
    mirroring the toggle grid of the staff screen.
    """

    def __init__(
        self,
        matrix: PermissionMatrix | None = None,
        scope_id: str | int | None = None,
        on_change: ChangeHandler | None = None,
        graph: DependencyGraph = DEPENDENCY_GRAPH,
    ) -> None:
        self._matrix: PermissionMatrix = copy_matrix(matrix or {})
        self._scope_id: str | None = None
        self._on_change = on_change
        self._graph = graph
        if scope_id is not None:
            self.select_scope(scope_id)

    @property
    def matrix(self) -> PermissionMatrix:
        return self._matrix

    @property
    def scope_id(self) -> str | None:
        return self._scope_id

    @property
    def scope(self) -> ScopeMatrix:
        """Scope matrix of the selected scope."""
        if self._scope_id is None:
            raise NoScopeSelectedError("Select a scope before editing permissions")
        return ensure_scope(self._matrix, self._scope_id, self._graph.modules)

    def select_scope(self, scope_id: str | int) -> ScopeMatrix:
        self._scope_id = scope_key(scope_id)
        return ensure_scope(self._matrix, self._scope_id, self._graph.modules)

    def load(self, matrix: PermissionMatrix) -> None:
        """Replace the held matrix, e.g. after the host reloaded it."""
        self._matrix = copy_matrix(matrix)
        if self._scope_id is not None:
            ensure_scope(self._matrix, self._scope_id, self._graph.modules)

    def dispatch(self, command: EditCommand) -> PermissionMatrix:
        """Apply a command to the selected scope and emit the change."""
        if self._scope_id is None:
            raise NoScopeSelectedError("Select a scope before editing permissions")
        self._matrix = apply_edit(self._matrix, self._scope_id, command, self._graph)
        if self._on_change is not None:
            self._on_change(self._matrix)
        return self._matrix

    def toggle(
        self, module: Module | str, bit: PermissionBit | str, value: bool
    ) -> PermissionMatrix:
        return self.dispatch(SetBit(parse_module(module), parse_bit(bit), value))

    def toggle_module(self, module: Module | str, value: bool) -> PermissionMatrix:
        return self.dispatch(SetModule(parse_module(module), value))

    def toggle_column(self, bit: PermissionBit | str, value: bool) -> PermissionMatrix:
        return self.dispatch(SetColumn(parse_bit(bit), value))

    def toggle_all(self, value: bool) -> PermissionMatrix:
        return self.dispatch(SetAll(value))

    def apply_preset(self, preset: Preset | str) -> PermissionMatrix:
        return self.dispatch(ApplyPreset(parse_preset(preset)))

    def roles(self) -> dict[Module, Role]:
        return scope_roles(self.scope)
