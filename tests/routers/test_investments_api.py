# tests/routers/test_investments_api.py
"""
Integration tests for Investment API endpoints.

- POST /investments (record + initial BUY)
- GET /investments
- GET /investments/{id}
- DELETE /investments/{id}
- GET /investment-types
"""

from datetime import date
from decimal import Decimal

from tests.conftest import (
    create_investment,
    create_journal_entry,
    get_auth_headers,
)


def _payload(**overrides) -> dict:
    payload = {
        "name": "Apple Inc.",
        "symbol": "aapl",
        "initial_quantity": "10",
        "initial_amount": "1500",
        "purchase_date": "2024-01-15",
    }
    payload.update(overrides)
    return payload


# =============================================================================
# CREATE
# =============================================================================

class TestCreateInvestment:

    def test_create(self, client, auth_headers, stock_type):
        response = client.post(
            "/investments",
            json=_payload(investment_type_id=stock_type.id, currency="eur"),
            headers=auth_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Apple Inc."
        assert data["symbol"] == "AAPL"
        assert data["currency"] == "EUR"
        assert data["currency_symbol"] == "€"
        assert data["category"] == "stock"
        assert data["type_name"] == "Stocks"
        assert Decimal(data["initial_price_per_unit"]) == Decimal("150")

    def test_initial_buy_is_recorded(self, client, auth_headers):
        investment_id = client.post("/investments", json=_payload(), headers=auth_headers).json()["id"]

        response = client.get(f"/investments/{investment_id}/transactions", headers=auth_headers)

        assert response.status_code == 200
        [txn] = response.json()
        assert txn["transaction_type"] == "buy"
        assert txn["notes"] == "Initial purchase"
        assert Decimal(txn["total_amount"]) == Decimal("1500")

    def test_unknown_type(self, client, auth_headers):
        response = client.post("/investments", json=_payload(investment_type_id=999), headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "InvestmentTypeNotFoundError"

    def test_zero_quantity(self, client, auth_headers):
        response = client.post("/investments", json=_payload(initial_quantity="0"), headers=auth_headers)

        assert response.status_code == 422
        fields = [d["field"] for d in response.json()["details"]]
        assert "body.initial_quantity" in fields

    def test_blank_name(self, client, auth_headers):
        response = client.post("/investments", json=_payload(name="   "), headers=auth_headers)

        assert response.status_code == 422

    def test_future_purchase_date(self, client, auth_headers):
        response = client.post(
            "/investments",
            json=_payload(purchase_date=date(date.today().year + 1, 1, 1).isoformat()),
            headers=auth_headers,
        )

        assert response.status_code == 422

    def test_requires_auth(self, client):
        response = client.post("/investments", json=_payload())

        assert response.status_code == 401


# =============================================================================
# READ
# =============================================================================

class TestReadInvestments:

    def test_list_newest_first(self, client, auth_headers, db, sample_user):
        first = create_investment(db, sample_user, name="First")
        second = create_investment(db, sample_user, name="Second")

        response = client.get("/investments", headers=auth_headers)

        assert response.status_code == 200
        assert [i["id"] for i in response.json()] == [second.id, first.id]

    def test_list_excludes_other_users(self, client, auth_headers, db, other_user):
        create_investment(db, other_user)

        response = client.get("/investments", headers=auth_headers)

        assert response.json() == []

    def test_get(self, client, auth_headers, db, sample_user):
        investment = create_investment(db, sample_user)

        response = client.get(f"/investments/{investment.id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["name"] == "Apple Inc."
        assert response.json()["category"] is None

    def test_get_missing(self, client, auth_headers):
        response = client.get("/investments/999", headers=auth_headers)

        assert response.status_code == 404
        data = response.json()
        assert data["error"] == "InvestmentNotFoundError"
        assert data["details"]["resource_id"] == 999

    def test_get_foreign(self, client, auth_headers, db, other_user):
        investment = create_investment(db, other_user)

        response = client.get(f"/investments/{investment.id}", headers=auth_headers)

        assert response.status_code == 403
        assert response.json()["error"] == "PermissionDeniedError"


# =============================================================================
# DELETE
# =============================================================================

class TestDeleteInvestment:

    def test_delete(self, client, auth_headers, db, sample_user):
        investment = create_investment(db, sample_user)
        create_journal_entry(db, investment)

        response = client.delete(f"/investments/{investment.id}", headers=auth_headers)

        assert response.status_code == 204
        assert client.get(f"/investments/{investment.id}", headers=auth_headers).status_code == 404
        assert client.get("/journal", headers=auth_headers).json() == []

    def test_delete_foreign(self, client, db, sample_user, other_user):
        investment = create_investment(db, sample_user)

        response = client.delete(f"/investments/{investment.id}", headers=get_auth_headers(other_user))

        assert response.status_code == 403


# =============================================================================
# INVESTMENT TYPES
# =============================================================================

class TestInvestmentTypes:

    def test_list(self, client, auth_headers, stock_type, gold_type):
        response = client.get("/investment-types", headers=auth_headers)

        assert response.status_code == 200
        assert [t["name"] for t in response.json()] == ["Gold", "Stocks"]
