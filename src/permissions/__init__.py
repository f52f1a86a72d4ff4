# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Staff permission engine: per-building CRUD matrix with module dependencies."""

from src.permissions.editor import PermissionEditor
from src.permissions.exceptions import (
    DependencyGraphError,
    NormalizationError,
    NoScopeSelectedError,
    PermissionEngineError,
    UnknownKeyError,
    UnknownModuleError,
    UnknownPermissionBitError,
    UnknownPresetError,
)
from src.permissions.graph import DEPENDENCY_GRAPH, DependencyGraph
from src.permissions.matrix import (
    GLOBAL_SCOPE,
    PermissionMatrix,
    PermissionRow,
    ScopeMatrix,
    ensure_scope,
    has_any_permission,
    matrix_from_dict,
    matrix_to_dict,
    normalize,
    normalize_matrix,
)
from src.permissions.modules import (
    ALL_MODULES,
    MODULE_DEPENDENCIES,
    MODULE_LABELS,
    PERMISSION_BITS,
    Module,
    PermissionBit,
)
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
    apply_preset,
    classify,
    set_all_bits_across_modules,
    set_all_bits_for_module,
    set_bit,
    set_bit_across_modules,
)

__all__ = [
    "ALL_MODULES",
    "DEPENDENCY_GRAPH",
    "GLOBAL_SCOPE",
    "MODULE_DEPENDENCIES",
    "MODULE_LABELS",
    "PERMISSION_BITS",
    "ApplyPreset",
    "DependencyGraph",
    "DependencyGraphError",
    "EditCommand",
    "Module",
    "NoScopeSelectedError",
    "NormalizationError",
    "PermissionBit",
    "PermissionEditor",
    "PermissionEngineError",
    "PermissionMatrix",
    "PermissionRow",
    "Preset",
    "Role",
    "ScopeMatrix",
    "SetAll",
    "SetBit",
    "SetColumn",
    "SetModule",
    "UnknownKeyError",
    "UnknownModuleError",
    "UnknownPermissionBitError",
    "UnknownPresetError",
    "apply_edit",
    "apply_preset",
    "classify",
    "ensure_scope",
    "has_any_permission",
    "matrix_from_dict",
    "matrix_to_dict",
    "normalize",
    "normalize_matrix",
    "set_all_bits_across_modules",
    "set_all_bits_for_module",
    "set_bit",
    "set_bit_across_modules",
]
