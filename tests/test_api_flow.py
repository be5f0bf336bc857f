from datetime import date, timedelta
from decimal import Decimal


def _data(response, status_code=200):
    assert response.status_code == status_code, response.text
    return response.json()["data"]


def test_rental_and_sale_flow(live_client):
    """End to end through the HTTP layer against a real store."""
    today = date.today()
    customer = _data(live_client.post("/api/v1/customers/", json={"name": "John Doe", "phone": "01700000000"}), 201)
    light = _data(live_client.post("/api/v1/inventory/", json={
        "name": "LED Par Light", "daily_rent_price": 100, "selling_price": 250, "total_quantity": 5,
    }), 201)
    mic = _data(live_client.post("/api/v1/inventory/", json={
        "name": "Wireless Mic", "daily_rent_price": 50, "total_quantity": 2,
    }), 201)

    rental = _data(live_client.post("/api/v1/rentals/", json={
        "customer_id": customer["id"],
        "rent_date": today.isoformat(),
        "expected_return_date": (today + timedelta(days=3)).isoformat(),
        "items": [{"item_id": light["id"], "quantity": 2}, {"item_id": mic["id"], "quantity": 1}],
    }), 201)
    assert Decimal(rental["total_amount"]) == Decimal("750")

    stock = {i["name"]: i["available"] for i in _data(live_client.get("/api/v1/inventory/"))}
    assert stock == {"LED Par Light": 3, "Wireless Mic": 1}

    # More lights than are on the shelf
    response = live_client.post("/api/v1/sales/", json={
        "date": today.isoformat(),
        "items": [{"item_id": light["id"], "quantity": 4}],
    })
    assert response.status_code == 409
    assert response.json()["error"]["details"]["item_name"] == "LED Par Light"

    sale = _data(live_client.post("/api/v1/sales/", json={
        "date": today.isoformat(),
        "items": [{"item_id": light["id"], "quantity": 3}],
    }), 201)
    assert Decimal(sale["total_amount"]) == Decimal("750")

    partial = _data(live_client.post(f"/api/v1/rentals/{rental['id']}/return", json={"item_ids": [mic["id"]]}))
    assert partial["status"] == "Partial Return"

    _data(live_client.post("/api/v1/payments/", json={
        "rental_id": rental["id"], "amount": 300, "date": today.isoformat(), "note": "Advance",
    }), 201)
    balance = _data(live_client.get(f"/api/v1/rentals/{rental['id']}/balance"))
    assert Decimal(balance["due_amount"]) == Decimal("450")

    report = _data(live_client.get("/api/v1/reports/today"))
    assert Decimal(report["rent_generated"]) == Decimal("750")
    assert Decimal(report["sales_revenue"]) == Decimal("750")
    assert Decimal(report["payments_received"]) == Decimal("1050")
    assert Decimal(report["due_from_rent"]) == Decimal("450")

    transactions = _data(live_client.get("/api/v1/reports/transactions"))
    assert {t["source_type"] for t in transactions} == {"Rental", "Sale"}

    dashboard = _data(live_client.get("/api/v1/reports/dashboard"))
    assert dashboard["items_rented"] == 2
    assert dashboard["total_customers"] == 1


def test_payment_with_both_references_is_rejected(live_client):
    today = date.today().isoformat()
    response = live_client.post("/api/v1/payments/", json={
        "rental_id": "5f0c1f9e-2d1a-4c52-9a3e-6b7d8e9f0a1b",
        "sale_id": "7a1b2c3d-4e5f-4a6b-8c9d-0e1f2a3b4c5d",
        "amount": 10,
        "date": today,
    })

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "validation_error"


def test_notes_endpoints(live_client):
    note = _data(live_client.post("/api/v1/notes/", json={"content": "Paid electrician 800"}), 201)
    assert [n["id"] for n in _data(live_client.get("/api/v1/notes/"))] == [note["id"]]

    _data(live_client.delete(f"/api/v1/notes/{note['id']}"))
    assert _data(live_client.get("/api/v1/notes/")) == []
    assert live_client.delete(f"/api/v1/notes/{note['id']}").status_code == 404
