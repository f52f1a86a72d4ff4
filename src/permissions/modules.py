# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Resource modules, permission bits and their static dependencies."""

from enum import Enum

from src.permissions.exceptions import UnknownModuleError, UnknownPermissionBitError


class Module(str, Enum):
    """Resource module that can be permissioned per building.

    Declaration order is the canonical iteration order of a scope.
    """

    BUILDINGS = "buildings"
    FLOORS = "floors"
    ROOMS = "rooms"
    BEDS = "beds"
    TENANTS = "tenants"
    BOOKINGS = "bookings"
    PAYMENTS = "payments"
    INVOICES = "invoices"
    EXPENSES = "expenses"


class PermissionBit(str, Enum):
    """CRUD permission bit of a module row."""

    VIEW = "view"
    ADD = "add"
    EDIT = "edit"
    DELETE = "delete"


ALL_MODULES: tuple[Module, ...] = tuple(Module)
PERMISSION_BITS: tuple[PermissionBit, ...] = tuple(PermissionBit)

MODULE_LABELS: dict[Module, str] = {
    Module.BUILDINGS: "Buildings",
    Module.FLOORS: "Floors",
    Module.ROOMS: "Rooms",
    Module.BEDS: "Beds",
    Module.TENANTS: "Tenants",
    Module.BOOKINGS: "Bookings",
    Module.PAYMENTS: "Payments",
    Module.INVOICES: "Invoices",
    Module.EXPENSES: "Expenses",
}

# child -> modules it requires (nearest first)
MODULE_DEPENDENCIES: dict[Module, tuple[Module, ...]] = {
    Module.BUILDINGS: (),
    Module.FLOORS: (Module.BUILDINGS,),
    Module.ROOMS: (Module.FLOORS, Module.BUILDINGS),
    Module.BEDS: (Module.ROOMS, Module.FLOORS, Module.BUILDINGS),
    Module.TENANTS: (Module.BUILDINGS,),
    Module.BOOKINGS: (Module.BUILDINGS,),
    Module.PAYMENTS: (Module.BUILDINGS,),
    Module.INVOICES: (Module.BUILDINGS,),
    Module.EXPENSES: (Module.BUILDINGS,),
}


def parse_module(value: Module | str) -> Module:
    """Coerce a module key into a Module, failing fast on unknown keys."""
    try:
        return Module(value)
    except ValueError as e:
        raise UnknownModuleError(f"Unknown module: {value!r}") from e


def parse_bit(value: PermissionBit | str) -> PermissionBit:
    """Coerce a permission key into a PermissionBit, failing fast on unknown keys."""
    try:
        return PermissionBit(value)
    except ValueError as e:
        raise UnknownPermissionBitError(f"Unknown permission bit: {value!r}") from e
