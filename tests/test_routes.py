"""
API tests: authentication, error-to-status mapping and a few end-to-end
flows through the HTTP layer.
"""

import inspect
from datetime import timedelta

import pytest

from dairyops.main import FARM_ROUTERS
from dairyops.services.auth.security import EMPLOYEE, encode_token

CATTLE = {
    "cattle_name": "Kaveri-001",
    "type": "COW",
    "breed": "GIR",
    "health_status": "HEALTHY",
    "weight": 350,
    "birth_date": "2021-03-10",
    "farm_entry_date": "2025-06-01",
}


@pytest.fixture
def employee_headers():
    token = encode_token({"sub": "EMP001", "username": "johndoe001", "user_type": EMPLOYEE})
    return {"Authorization": f"Bearer {token}"}


class TestPublicEndpoints:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "version" in response.json()

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"


class TestAuthentication:
    def test_missing_token(self, client):
        response = client.get("/animal")
        assert response.status_code == 401
        assert response.json() == {"detail": "Missing bearer token"}

    def test_garbage_token(self, client):
        response = client.get("/animal", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"

    def test_expired_token(self, client):
        token = encode_token({"sub": "1", "user_type": "super_admin"}, timedelta(seconds=-5))
        response = client.get("/animal", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Token expired"

    def test_employee_cannot_manage_staff(self, client, employee_headers):
        response = client.get("/employee/roles", headers=employee_headers)
        assert response.status_code == 403

    def test_register_login_and_profile(self, client):
        response = client.post(
            "/auth/register", json={"email": "owner@dairyfarm.in", "password": "secret123"}
        )
        assert response.status_code == 201

        response = client.post(
            "/auth/login", json={"identifier": "owner@dairyfarm.in", "password": "secret123"}
        )
        assert response.status_code == 200
        token = response.json()["access_token"]

        response = client.get("/auth/profile", headers={"Authorization": f"Bearer {token}"})
        assert response.json()["profile"]["email"] == "owner@dairyfarm.in"

    def test_bad_password(self, client, admin):
        response = client.post(
            "/auth/login", json={"identifier": "owner@dairyfarm.in", "password": "wrong-one"}
        )
        assert response.status_code == 401


class TestCattleApi:
    def test_add_then_conflict(self, client, admin_headers):
        response = client.post("/animal", json=CATTLE, headers=admin_headers)
        assert response.status_code == 201
        assert response.json()["message"] == "New animal added successfully!"

        response = client.post("/animal", json=CATTLE, headers=admin_headers)
        assert response.status_code == 409
        assert response.json()["detail"] == "Cattle ID is already in use"

    def test_request_validation(self, client, admin_headers):
        response = client.post(
            "/animal", json={**CATTLE, "cattle_name": "no digits"}, headers=admin_headers
        )
        assert response.status_code == 422

    def test_unknown_animal(self, client, admin_headers):
        response = client.get("/animal/Ghost-404", headers=admin_headers)
        assert response.status_code == 404

    def test_listing_query_string(self, client, admin_headers):
        client.post("/animal", json=CATTLE, headers=admin_headers)
        client.post(
            "/animal",
            json={**CATTLE, "cattle_name": "Bela-002", "type": "GOAT", "breed": "KARAMPASU"},
            headers=admin_headers,
        )

        response = client.get(
            "/animal", params={"filter": ["GOAT"], "sortBy": "name-asc"}, headers=admin_headers
        )
        body = response.json()
        assert response.status_code == 200
        assert [item["cattle_name"] for item in body["items"]] == ["Bela-002"]
        assert body["total_pages"] == 1

    def test_bad_page(self, client, admin_headers):
        response = client.get("/animal", params={"page": 0}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "Page number must be 1 or greater"

    def test_bad_period(self, client, admin_headers):
        response = client.get(
            "/animal/dashboard/top-section", params={"query": "Decade"}, headers=admin_headers
        )
        assert response.status_code == 400


class TestDashboardsUseTheServerClock:
    def test_milk_today(self, client, admin_headers):
        client.post("/animal", json=CATTLE, headers=admin_headers)
        client.post(
            "/milk",
            json={
                "cattle_name": "Kaveri-001",
                "date": "2025-06-15T06:00:00",
                "morning_milk": 6,
                "evening_milk": 3,
                "milk_grade": "A2",
            },
            headers=admin_headers,
        )

        response = client.get("/milk/dashboard", params={"query": "Today"}, headers=admin_headers)
        cards = response.json()["cards"]
        assert response.status_code == 200
        assert cards[0]["title"] == "Total Milk"
        assert cards[0]["number"] == "9.00"

    def test_monthly_report(self, client, admin_headers):
        response = client.get("/milk/report/monthly", headers=admin_headers)
        assert response.status_code == 200
        assert len(response.json()["data"]) == 12


class TestFeedApi:
    def test_overdraw_is_a_conflict(self, client, admin_headers):
        client.post("/animal", json=CATTLE, headers=admin_headers)
        stock = {
            "name": "Green Fodder",
            "unit": "KG",
            "quantity": 10,
            "date": "2025-06-14T08:00:00",
        }
        assert client.post("/feed-stock", json=stock, headers=admin_headers).status_code == 201
        record = {
            "cattle_name": "Kaveri-001",
            "type": "COW",
            "feed_type": "FEED",
            "feed_name": "Green Fodder",
            "session": "MORNING",
            "quantity": 25,
            "unit": "KG",
            "date": "2025-06-15T07:00:00",
        }

        response = client.post("/feed-management", json=record, headers=admin_headers)
        assert response.status_code == 409

        response = client.post(
            "/feed-management", json={**record, "quantity": 4}, headers=admin_headers
        )
        assert response.status_code == 201

        stocks = client.get("/feed-stock/available", headers=admin_headers).json()["stocks"]
        assert float(stocks[0]["quantity"]) == 6


class TestStaffApi:
    def test_role_employee_and_details(self, client, admin_headers):
        assert client.post(
            "/employee/roles", json={"name": "Manager"}, headers=admin_headers
        ).status_code == 201

        response = client.post(
            "/employee",
            json={
                "name": "John Doe",
                "mobile": "9876543210",
                "role_name": "Manager",
                "address": "12 Farm Road",
            },
            headers=admin_headers,
        )
        assert response.status_code == 201
        assert response.json()["credentials"]["username"] == "johndoe001"

        response = client.get("/employee/details/johndoe001", headers=admin_headers)
        assert response.json()["employee"]["id"] == "EMP001"

    def test_unknown_role(self, client, admin_headers):
        response = client.get("/employee/roles/Ghost", headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == 'Role "Ghost" does not exist'


class TestHandlers:
    def test_database_handlers_run_in_the_threadpool(self):
        """Handlers make blocking session calls, so none may be a coroutine."""
        coroutines = [
            route.path
            for router in FARM_ROUTERS
            for route in router.routes
            if inspect.iscoroutinefunction(route.endpoint)
        ]
        assert coroutines == []
