# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Integration tests for the staff permission API."""

import json
import uuid

import pytest

from src.api.deps import get_building_directory
from src.events import AppEvent, event_bus
from src.main import app
from src.services.building_directory import BuildingDirectory, BuildingDirectoryError


class UnavailableDirectory(BuildingDirectory):
    """Directory whose remote end is down."""

    async def list_buildings(self):
        raise BuildingDirectoryError("Building directory returned HTTP 502")


@pytest.fixture
def unavailable_directory(client):
    """Route the API to a failing building directory."""
    app.dependency_overrides[get_building_directory] = lambda: UnavailableDirectory()
    yield
    app.dependency_overrides.pop(get_building_directory, None)


def _url(staff, suffix=""):
    return f"/api/v1/staff/{staff.id}/permissions{suffix}"


class TestCatalogueEndpoints:
    """Tests for module and scope listings."""

    def test_health(self, client):
        """Test the health endpoint."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_list_modules(self, client):
        """Test that all modules are listed with their dependencies."""
        response = client.get("/api/v1/permissions/modules")

        assert response.status_code == 200
        data = response.json()
        assert [m["key"] for m in data] == [
            "buildings",
            "floors",
            "rooms",
            "beds",
            "tenants",
            "bookings",
            "payments",
            "invoices",
            "expenses",
        ]
        assert data[3] == {
            "key": "beds",
            "label": "Beds",
            "parents": ["rooms", "floors", "buildings"],
        }

    def test_list_scopes(self, client, building):
        """Test that local buildings are offered as scopes."""
        response = client.get("/api/v1/permissions/scopes")

        assert response.status_code == 200
        assert response.json() == [{"value": str(building.id), "label": "Harbour View"}]


class TestMatrixEndpoints:
    """Tests for reading and replacing the whole matrix."""

    def test_get_empty_matrix(self, client, staff_member):
        """Test that a new staff member has no scopes."""
        response = client.get(_url(staff_member))

        assert response.status_code == 200
        assert response.json() == {"staff_id": str(staff_member.id), "permissions": {}}

    def test_unknown_staff(self, client):
        """Test that an unknown staff member yields 404."""
        response = client.get(f"/api/v1/staff/{uuid.uuid4()}/permissions")

        assert response.status_code == 404
        assert response.json()["detail"] == "Staff member not found"

    def test_put_normalizes(self, client, staff_member, db_session):
        """Test that a replaced matrix is normalized before it is stored."""
        response = client.put(
            _url(staff_member),
            json={"12": {"beds": {"add": True}}},
        )

        assert response.status_code == 200
        scope = response.json()["permissions"]["12"]
        assert scope["rooms"] == {"view": True, "add": False, "edit": False, "delete": False}
        assert scope["buildings"]["view"] is True
        assert scope["tenants"]["view"] is False

        db_session.refresh(staff_member)
        assert json.loads(staff_member.permissions)["12"]["floors"]["view"] is True

    def test_put_then_get(self, client, staff_member):
        """Test that the stored matrix is returned by GET."""
        client.put(_url(staff_member), json={"7": {"payments": {"view": True}}})

        response = client.get(_url(staff_member))

        assert response.json()["permissions"]["7"]["payments"]["view"] is True

    def test_put_unknown_module(self, client, staff_member):
        """Test that modules outside the closed set are rejected."""
        response = client.put(
            _url(staff_member), json={"1": {"parking": {"view": True}}}
        )
        assert response.status_code == 422

    def test_put_publishes_event(self, client, staff_member):
        """Test that replacing the matrix notifies subscribers."""
        received = []
        event_bus.subscribe(AppEvent.STAFF_PERMISSIONS_REPLACED, received.append, "test")

        client.put(_url(staff_member), json={})

        assert len(received) == 1
        assert received[0].data["staff_id"] == str(staff_member.id)


class TestScopeEndpoints:
    """Tests for per-scope reads and edits."""

    def test_untouched_scope(self, client, staff_member):
        """Test that an unknown scope is shown all-false with its raw id as label."""
        response = client.get(_url(staff_member, "/42"))

        assert response.status_code == 200
        data = response.json()
        assert data["scope_id"] == "42"
        assert data["scope_label"] == "42"
        assert len(data["modules"]) == 9
        assert {m["role_label"] for m in data["modules"]} == {"None"}
        assert data["columns"] == {
            "view": False,
            "add": False,
            "edit": False,
            "delete": False,
        }
        assert data["all_checked"] is False

    def test_scope_label_from_directory(self, client, staff_member, building):
        """Test that a known building id resolves to its name."""
        response = client.get(_url(staff_member, f"/{building.id}"))
        assert response.json()["scope_label"] == "Harbour View"

    def test_scope_search(self, client, staff_member):
        """Test that the search term filters module rows."""
        response = client.get(_url(staff_member, "/1"), params={"search": "BED"})

        assert [m["module"] for m in response.json()["modules"]] == ["beds"]

    def test_edit_set_module(self, client, staff_member):
        """Test granting everything on rooms in scope 12."""
        response = client.post(
            _url(staff_member, "/12/edits"),
            json={"op": "set_module", "module": "rooms", "value": True},
        )

        assert response.status_code == 200
        rows = {m["module"]: m for m in response.json()["modules"]}
        assert rows["rooms"]["role"] == "admin"
        assert rows["floors"]["role_label"] == "Read-only"
        assert rows["buildings"]["role_label"] == "Read-only"
        assert rows["beds"]["role_label"] == "None"

        stored = client.get(_url(staff_member)).json()["permissions"]
        assert list(stored) == ["12"]

    def test_edit_preset_and_column(self, client, staff_member):
        """Test a preset followed by a column revocation."""
        client.post(
            _url(staff_member, "/3/edits"),
            json={"op": "apply_preset", "preset": "manager"},
        )
        response = client.post(
            _url(staff_member, "/3/edits"),
            json={"op": "set_column", "bit": "view", "value": False},
        )

        data = response.json()
        assert {m["role_label"] for m in data["modules"]} == {"Custom"}
        assert data["columns"]["view"] is False
        assert data["columns"]["add"] is True

    def test_edit_view_revocation_cascades(self, client, staff_member):
        """Test that revoking buildings.view wipes the scope."""
        client.post(
            _url(staff_member, "/5/edits"),
            json={"op": "set_bit", "module": "beds", "bit": "delete", "value": True},
        )
        response = client.post(
            _url(staff_member, "/5/edits"),
            json={"op": "set_bit", "module": "buildings", "bit": "view", "value": False},
        )

        assert {m["role_label"] for m in response.json()["modules"]} == {"None"}

    def test_edit_set_all(self, client, staff_member):
        """Test the Admin (all) toggle."""
        response = client.post(
            _url(staff_member, "/9/edits"),
            json={"op": "set_all", "value": True},
        )
        assert response.json()["all_checked"] is True

    def test_edit_invalid_operation(self, client, staff_member):
        """Test that unknown operations and modules are rejected."""
        response = client.post(
            _url(staff_member, "/1/edits"),
            json={"op": "grant_everything"},
        )
        assert response.status_code == 422

        response = client.post(
            _url(staff_member, "/1/edits"),
            json={"op": "set_module", "module": "parking", "value": True},
        )
        assert response.status_code == 422

    def test_edit_unknown_staff(self, client):
        """Test that editing an unknown staff member yields 404."""
        response = client.post(
            f"/api/v1/staff/{uuid.uuid4()}/permissions/1/edits",
            json={"op": "set_all", "value": True},
        )
        assert response.status_code == 404


class TestDirectoryFailures:
    """Tests for building directory outages."""

    def test_list_scopes_unavailable(self, client, unavailable_directory):
        """Test that a directory outage on the scope list yields 503."""
        response = client.get("/api/v1/permissions/scopes")

        assert response.status_code == 503
        assert "502" in response.json()["detail"]

    def test_scope_read_unavailable(self, client, staff_member, unavailable_directory):
        """Test that reading a scope without a label yields 503."""
        response = client.get(_url(staff_member, "/9"))
        assert response.status_code == 503

    def test_saved_edit_is_reported_with_raw_label(
        self, client, staff_member, db_session, unavailable_directory
    ):
        """Test that a stored edit succeeds even when the label lookup fails."""
        response = client.post(
            _url(staff_member, "/9/edits"),
            json={"op": "set_all", "value": True},
        )

        assert response.status_code == 200
        assert response.json()["scope_label"] == "9"
        assert response.json()["all_checked"] is True

        db_session.refresh(staff_member)
        stored = json.loads(staff_member.permissions)
        assert stored["9"]["beds"] == {
            "view": True,
            "add": True,
            "edit": True,
            "delete": True,
        }
