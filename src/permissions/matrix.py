# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Permission matrix data model and normalization.

A permission matrix maps a scope (building id, or the ``global`` sentinel)
to a scope matrix, which maps every module to a row of four CRUD bits.
After every completed edit a scope matrix satisfies two invariants:

* upward closure: a module with any bit set has ``view`` on every ancestor
* downward closure: a module without ``view`` has no bit set on any
  descendant
"""

import copy
import logging
from dataclasses import asdict, dataclass
from typing import Any

from src.permissions.exceptions import NormalizationError
from src.permissions.graph import DEPENDENCY_GRAPH, DependencyGraph
from src.permissions.modules import ALL_MODULES, PERMISSION_BITS, Module, parse_module

logger = logging.getLogger(__name__)

GLOBAL_SCOPE = "global"


@dataclass(slots=True)
class PermissionRow:
    """CRUD bits of one module in one scope."""

    view: bool = False
    add: bool = False
    edit: bool = False
    delete: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "PermissionRow":
        """Build a row from its wire form, treating missing or non-bool bits as False."""
        data = data or {}
        return cls(
            **{
                bit.value: data.get(bit.value) is True
                for bit in PERMISSION_BITS
            }
        )

    @classmethod
    def uniform(cls, value: bool) -> "PermissionRow":
        return cls(view=value, add=value, edit=value, delete=value)

    def to_dict(self) -> dict[str, bool]:
        return asdict(self)

    def set_all(self, value: bool) -> None:
        self.view = self.add = self.edit = self.delete = value

    def clear(self) -> None:
        self.set_all(False)


ScopeMatrix = dict[Module, PermissionRow]
PermissionMatrix = dict[str, ScopeMatrix]


def scope_key(scope_id: str | int) -> str:
    """Canonical key of a scope; ids are opaque, stored in JSON key form."""
    return str(scope_id)


def has_any_permission(row: PermissionRow | None) -> bool:
    """Return True when any of the four bits is set."""
    return row is not None and (row.view or row.add or row.edit or row.delete)


def empty_scope(modules: tuple[Module, ...] = ALL_MODULES) -> ScopeMatrix:
    return {module: PermissionRow() for module in modules}


def ensure_scope(
    matrix: PermissionMatrix,
    scope_id: str | int,
    modules: tuple[Module, ...] = ALL_MODULES,
) -> ScopeMatrix:
    """Return the scope matrix for a scope, creating missing parts in place.

    A scope that was never touched is inserted with every module all-false.
    An existing scope gets an all-false row for any module it lacks.
    """
    key = scope_key(scope_id)
    scope = matrix.get(key)
    if scope is None:
        scope = empty_scope(modules)
        matrix[key] = scope
        return scope
    for module in modules:
        if module not in scope:
            scope[module] = PermissionRow()
    return scope


def copy_matrix(matrix: PermissionMatrix) -> PermissionMatrix:
    """Deep copy of a matrix with every scope id in its string key form."""
    return {scope_key(scope_id): copy.deepcopy(scope) for scope_id, scope in matrix.items()}


def _upward_pass(scope: ScopeMatrix, graph: DependencyGraph) -> bool:
    changed = False
    for module in graph.modules:
        if not has_any_permission(scope[module]):
            continue
        for ancestor in graph.ancestors_of(module):
            if not scope[ancestor].view:
                logger.debug(f"Granting view on {ancestor.value} required by {module.value}")
                scope[ancestor].view = True
                changed = True
    return changed


def _downward_pass(scope: ScopeMatrix, graph: DependencyGraph) -> bool:
    changed = False
    for module in graph.modules:
        if scope[module].view:
            continue
        for descendant in graph.descendants_of(module):
            if has_any_permission(scope[descendant]):
                logger.debug(
                    f"Clearing {descendant.value}: {module.value} is not viewable"
                )
                scope[descendant].clear()
                changed = True
    return changed


def normalize(
    scope: ScopeMatrix, graph: DependencyGraph = DEPENDENCY_GRAPH
) -> ScopeMatrix:
    """Restore upward and downward closure on a scope matrix in place.

    Runs the upward pass then the downward pass, repeating the pair until
    nothing changes. For the built-in three-level graph the first pair
    already reaches the fixed point.

    Raises:
        NormalizationError: If no fixed point is reached
    """
    for module in graph.modules:
        scope.setdefault(module, PermissionRow())

    max_rounds = len(graph.modules) + 1
    for _ in range(max_rounds):
        up = _upward_pass(scope, graph)
        down = _downward_pass(scope, graph)
        if not (up or down):
            return scope
    raise NormalizationError(
        f"Permission matrix did not stabilise after {max_rounds} rounds"
    )


def normalize_matrix(
    matrix: PermissionMatrix, graph: DependencyGraph = DEPENDENCY_GRAPH
) -> PermissionMatrix:
    """Normalize every scope of a matrix in place.

    Scope ids that are not strings yet are moved to their string key.
    """
    for scope_id in list(matrix):
        key = scope_key(scope_id)
        if key != scope_id:
            matrix[key] = matrix.pop(scope_id)
        normalize(ensure_scope(matrix, key, graph.modules), graph)
    return matrix


def scope_from_dict(data: dict[str, Any] | None) -> ScopeMatrix:
    """Parse one scope from its wire form; unknown module keys raise."""
    scope = empty_scope()
    for module_key, row in (data or {}).items():
        scope[parse_module(module_key)] = PermissionRow.from_dict(row)
    return scope


def scope_to_dict(scope: ScopeMatrix) -> dict[str, dict[str, bool]]:
    return {module.value: scope[module].to_dict() for module in ALL_MODULES if module in scope}


def matrix_from_dict(data: dict[str, Any] | None) -> PermissionMatrix:
    """Parse a matrix from the persisted ``scope -> module -> bits`` mapping."""
    return {
        scope_key(scope_id): scope_from_dict(scope)
        for scope_id, scope in (data or {}).items()
    }


def matrix_to_dict(matrix: PermissionMatrix) -> dict[str, dict[str, dict[str, bool]]]:
    """Serialize a matrix into plain JSON-compatible dicts."""
    return {scope_id: scope_to_dict(scope) for scope_id, scope in matrix.items()}
