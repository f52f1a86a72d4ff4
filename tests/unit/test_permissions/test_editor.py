# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for the permission editing session."""

import pytest

from src.permissions.editor import PermissionEditor
from src.permissions.exceptions import NoScopeSelectedError, UnknownModuleError
from src.permissions.matrix import PermissionRow, empty_scope
from src.permissions.modules import ALL_MODULES, Module
from src.permissions.operations import Role, SetAll


@pytest.fixture
def changes():
    """Collect every matrix passed to on_change."""
    return []


@pytest.fixture
def editor(changes):
    """Editor with scope "12" selected."""
    return PermissionEditor(scope_id="12", on_change=changes.append)


class TestScopeSelection:
    """Tests for scope selection."""

    def test_editing_without_scope_raises(self, changes):
        """Test that no operation is possible before a scope is chosen."""
        editor = PermissionEditor(on_change=changes.append)

        with pytest.raises(NoScopeSelectedError):
            editor.toggle(Module.ROOMS, "view", True)
        with pytest.raises(NoScopeSelectedError):
            editor.roles()
        assert changes == []

    def test_select_scope_creates_empty_scope(self):
        """Test that selecting an unknown scope creates it all-false."""
        editor = PermissionEditor()

        scope = editor.select_scope(7)

        assert editor.scope_id == "7"
        assert set(scope) == set(ALL_MODULES)
        assert all(row == PermissionRow() for row in scope.values())

    def test_initial_matrix_is_copied(self):
        """Test that the editor never mutates the caller's matrix."""
        original = {"1": empty_scope()}
        editor = PermissionEditor(original, scope_id="1")

        editor.toggle_all(True)

        assert original["1"][Module.BEDS] == PermissionRow()
        assert editor.matrix["1"][Module.BEDS] == PermissionRow.uniform(True)


    def test_numeric_scope_ids_are_shared(self, changes):
        """Test that a matrix keyed by int ids is edited in its existing scope."""
        scope = empty_scope()
        scope[Module.BUILDINGS].view = True
        scope[Module.TENANTS].view = True
        editor = PermissionEditor({12: scope}, scope_id=12, on_change=changes.append)

        editor.toggle(Module.PAYMENTS, "view", True)

        assert list(editor.matrix) == ["12"]
        assert editor.matrix["12"][Module.TENANTS].view is True
        assert editor.matrix["12"][Module.PAYMENTS].view is True

    def test_load_uses_string_scope_ids(self, editor):
        """Test that a reloaded int-keyed matrix keeps its grants."""
        scope = empty_scope()
        scope[Module.BUILDINGS].view = True

        editor.load({12: scope})

        assert list(editor.matrix) == ["12"]
        assert editor.scope[Module.BUILDINGS].view is True


class TestDispatch:
    """Tests for edit dispatching."""

    def test_on_change_fires_once_per_operation(self, editor, changes):
        """Test that each user action emits exactly one change."""
        editor.toggle("beds", "add", True)
        editor.toggle_module(Module.TENANTS, True)
        editor.toggle_column("edit", False)
        editor.toggle_all(False)
        editor.apply_preset("manager")

        assert len(changes) == 5
        assert changes[-1] is editor.matrix

    def test_emitted_matrix_is_normalized(self, editor, changes):
        """Test that the change carries the full normalized matrix."""
        editor.toggle(Module.BEDS, "add", True)

        emitted = changes[0]["12"]
        assert emitted[Module.BUILDINGS].view is True
        assert emitted[Module.FLOORS].view is True
        assert emitted[Module.ROOMS].view is True

    def test_dispatch_command(self, editor):
        """Test dispatching a command object directly."""
        matrix = editor.dispatch(SetAll(True))
        assert all(row == PermissionRow.uniform(True) for row in matrix["12"].values())

    def test_unknown_module_does_not_emit(self, editor, changes):
        """Test that invalid input raises before any change is emitted."""
        with pytest.raises(UnknownModuleError):
            editor.toggle("parking", "view", True)
        assert changes == []

    def test_editor_without_callback(self):
        """Test that on_change is optional."""
        editor = PermissionEditor(scope_id="1")
        editor.apply_preset("read_only")
        assert editor.scope[Module.EXPENSES] == PermissionRow(view=True)

    def test_edits_stay_in_selected_scope(self, editor):
        """Test that switching scope keeps the previous scope intact."""
        editor.apply_preset("read_only")
        editor.select_scope("13")
        editor.toggle_all(True)

        assert editor.matrix["12"][Module.ROOMS] == PermissionRow(view=True)
        assert editor.matrix["13"][Module.ROOMS] == PermissionRow.uniform(True)


class TestRoles:
    """Tests for per-module role labels."""

    def test_roles_after_preset(self, editor):
        """Test that a manager preset labels every module Manager."""
        editor.apply_preset("manager")
        assert set(editor.roles().values()) == {Role.MANAGER}

    def test_roles_mixed(self, editor):
        """Test role labels after a single leaf grant."""
        editor.toggle(Module.BEDS, "add", True)

        roles = editor.roles()

        assert roles[Module.BEDS] is Role.CUSTOM
        assert roles[Module.ROOMS] is Role.READ_ONLY
        assert roles[Module.TENANTS] is Role.NONE

    def test_load_replaces_matrix(self, editor):
        """Test that load swaps in a new matrix and keeps the selection."""
        editor.load({})
        assert editor.scope_id == "12"
        assert set(editor.matrix) == {"12"}
