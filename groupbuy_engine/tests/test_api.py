"""
Tests: HTTP layer.

Run with:
    pytest groupbuy_engine/tests/test_api.py -v
"""

import pytest
from fastapi.testclient import TestClient

from groupbuy_engine.api import create_app

TIERS = [
    {"id": "t1", "min_quota": 0, "max_quota": 9, "discount_value": "0.05"},
    {"id": "t2", "min_quota": 10, "max_quota": 19, "discount_value": "0.10"},
]


@pytest.fixture
def client():
    return TestClient(create_app())


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"


class TestTierRoutes:
    def test_validate_ok(self, client):
        resp = client.post("/api/tiers/validate", json={"tiers": list(reversed(TIERS))})
        assert resp.status_code == 200
        body = resp.json()
        assert body["valid"] is True
        assert [t["id"] for t in body["tiers"]] == ["t1", "t2"]

    def test_validate_overlap_is_422(self, client):
        tiers = [dict(TIERS[0], max_quota=10), TIERS[1]]
        resp = client.post("/api/tiers/validate", json={"tiers": tiers})
        assert resp.status_code == 422
        assert resp.json()["rule"] == "tier_overlap"
        assert resp.json()["tier_ids"] == ["t1", "t2"]

    def test_resolve(self, client):
        resp = client.post("/api/tiers/resolve", json={"tiers": TIERS, "booked_quota": 10})
        assert resp.status_code == 200
        assert resp.json()["tier"]["id"] == "t2"

    def test_resolve_none(self, client):
        resp = client.post("/api/tiers/resolve", json={"tiers": [], "booked_quota": 10})
        assert resp.json()["tier"] is None


class TestPricingRoutes:
    def test_quote_at_current_tier(self, client):
        resp = client.post(
            "/api/pricing/quote",
            json={"base_price": "100", "quantity": 3, "booked_quota": 12, "tiers": TIERS},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert float(body["unit_price"]) == 90.0
        assert float(body["total_price"]) == 270.0


class TestProposalRoutes:
    def test_summary(self, client):
        resp = client.post(
            "/api/proposals/summary",
            json={
                "proposal": {
                    "id": "a0P1", "status": "Active",
                    "min_quota": 5, "max_quota": 20, "booked_quota": 10,
                },
                "tiers": TIERS,
                "account_id": "001A",
            },
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["progress_percentage"] == 50
        assert body["current_tier_id"] == "t2"
        assert body["can_order"] is True

    def test_validate_form(self, client):
        resp = client.post("/api/proposals/validate", json={"name": "X", "min_quota": 5, "max_quota": 1})
        body = resp.json()
        assert body["valid"] is False
        assert any(v["rule"] == "quota_range_invalid" for v in body["violations"])

    def test_validate_form_with_nan(self, client):
        resp = client.post(
            "/api/proposals/validate",
            json={"min_quota": "NaN", "max_quota": 5, "base_price": "NaN"},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["valid"] is False
        assert any(v["rule"] == "base_price_invalid" for v in body["violations"])

    def test_transition_allowed(self, client):
        resp = client.post("/api/proposals/transition", json={"status": "Approved", "action": "activate"})
        assert resp.status_code == 200
        assert resp.json()["new_status"] == "Active"

    def test_transition_rejected(self, client):
        resp = client.post("/api/proposals/transition", json={"status": "Closed", "action": "edit"})
        assert resp.status_code == 422
        assert resp.json()["rule"] == "transition_not_allowed"


class TestOrderRoutes:
    def test_validate_modification(self, client):
        resp = client.post(
            "/api/orders/validate",
            json={"quantity": 6, "available_quota": 2, "existing_quantity": 4},
        )
        assert resp.json() == {"valid": True, "violations": []}

    def test_history(self, client):
        resp = client.post(
            "/api/orders/history",
            json=[{
                "proposal": {"id": "a0P1", "max_quota": 20, "booked_quota": 10, "base_price": "50"},
                "orders": [{"id": "o1", "quantity": 2, "status": "Pending"}],
                "tiers": TIERS,
            }],
        )
        assert resp.status_code == 200
        [group] = resp.json()
        assert group["total_quantity"] == 2
        assert float(group["orders"][0]["discounted_total_price"]) == 90.0
