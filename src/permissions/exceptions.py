# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Exceptions raised by the permission engine.

All of them signal programming errors in the caller (an unknown module, a
broken dependency declaration, editing without a selected scope). They are
raised immediately and are never translated into a partially edited matrix.
"""


class PermissionEngineError(Exception):
    """Base exception for permission engine errors."""


class UnknownKeyError(PermissionEngineError, ValueError):
    """A key outside one of the closed sets was used."""


class UnknownModuleError(UnknownKeyError):
    """A module outside the closed set was used."""


class UnknownPermissionBitError(UnknownKeyError):
    """A permission bit other than view, add, edit or delete was used."""


class UnknownPresetError(UnknownKeyError):
    """A preset name that is not defined was used."""


class DependencyGraphError(PermissionEngineError):
    """The module dependency declaration is incomplete or cyclic."""


class NormalizationError(PermissionEngineError):
    """Normalization did not reach a fixed point."""


class NoScopeSelectedError(PermissionEngineError):
    """An edit was dispatched before a scope was selected."""
