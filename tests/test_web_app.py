from __future__ import annotations

import csv
import io
import logging
from contextlib import contextmanager
from datetime import date
from pathlib import Path

from fastapi.testclient import TestClient

from apps.web import create_app
from apps.web.config import ConsoleConfig, PaginationConfig
from packages.db import create_all, session_scope
from services.access import RoleService


def _client(
    tmp_path: Path,
    *,
    config: ConsoleConfig | None = None,
    today: date = date(2024, 3, 20),
    raise_server_exceptions: bool = True,
) -> TestClient:
    app = create_app(
        db_path=tmp_path / "console.db",
        config=config or ConsoleConfig(),
        today_provider=lambda: today,
    )
    return TestClient(app, raise_server_exceptions=raise_server_exceptions)


def _product(client: TestClient, domain: str = "grocery", **overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "name": "Basmati Rice",
        "category": "Grains",
        "supplier": "Sample Grocery Supplier",
        "price": 2.5,
        "quantity": 40,
        "purchase_date": "2024-03-01",
    }
    payload.update(overrides)
    response = client.post(f"/api/{domain}/products", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_root_endpoint_lists_links(tmp_path: Path) -> None:
    client = _client(tmp_path)

    response = client.get("/")
    assert response.status_code == 200
    payload = response.json()
    assert payload["app"] == "CareStore console API"
    assert payload["status"] == "ok"
    assert "/health" in payload["links"].values()
    assert client.get("/health").json() == {"status": "ok"}


def test_category_crud_and_errors(tmp_path: Path) -> None:
    client = _client(tmp_path)

    created = client.post("/api/grocery/categories", json={"name": "Fruits", "description": "Fresh"})
    assert created.status_code == 201
    category_id = created.json()["id"]

    duplicate = client.post("/api/grocery/categories", json={"name": "fruits"})
    assert duplicate.status_code == 409
    assert duplicate.json()["error"] == "conflict"

    missing_name = client.post("/api/grocery/categories", json={"description": "no name"})
    assert missing_name.status_code == 400
    assert missing_name.json() == {"error": "invalid", "detail": "Category name is required"}

    updated = client.put(f"/api/grocery/categories/{category_id}", json={"status": "inactive"})
    assert updated.json()["status"] == "inactive"
    assert updated.json()["name"] == "Fruits"

    assert client.get("/api/pharmacy/categories").status_code == 404
    assert client.delete(f"/api/medicine/categories/{category_id}").status_code == 404
    assert client.delete(f"/api/grocery/categories/{category_id}").json() == {"status": "deleted", "id": category_id}


def test_supplier_accepts_camel_case_contact(tmp_path: Path) -> None:
    client = _client(tmp_path)

    response = client.post(
        "/api/medicine/suppliers",
        json={"name": "PharmaCorp Ltd", "contactPerson": "Sam", "email": "sam@pharma.example", "phone": "555"},
    )
    assert response.status_code == 201
    assert response.json()["contact_person"] == "Sam"


def test_product_list_filters_and_paginates(tmp_path: Path) -> None:
    config = ConsoleConfig(pagination=PaginationConfig(page_size=2, max_page_size=5))
    client = _client(tmp_path, config=config)
    for index in range(5):
        _product(client, name=f"Item {index}", category="Grains" if index % 2 else "Spices")

    response = client.get("/api/grocery/products", params={"page": 3})
    payload = response.json()
    assert [item["code"] for item in payload["items"]] == ["GR0005"]
    meta = payload["meta"]
    assert (meta["total"], meta["page"], meta["total_pages"], meta["start"], meta["end"]) == (5, 3, 3, 5, 5)
    assert meta["filters"]["categories"] == ["Grains", "Spices"]

    filtered = client.get("/api/grocery/products", params={"category": "grains", "page_size": 50}).json()
    assert [item["name"] for item in filtered["items"]] == ["Item 1", "Item 3"]
    assert filtered["meta"]["page_size"] == 5
    assert filtered["meta"]["clamped"] is True

    searched = client.get("/api/grocery/products", params={"search": "item 4"}).json()
    assert searched["meta"]["total"] == 1
    assert searched["meta"]["unfiltered_total"] == 5


def test_product_payload_ignores_aggregates(tmp_path: Path) -> None:
    client = _client(tmp_path)
    product = _product(client, balance_stock=999, settlement_amount=50)

    assert product["balance_stock"] == 40
    assert product["settlement_amount"] == 0
    assert product["purchase_amount"] == 100.0
    assert product["display_status"] == "in_stock"

    invalid = client.post("/api/grocery/products", json={"name": "Rice", "category": "Grains", "supplier": "S", "price": -1, "quantity": 1})
    assert invalid.status_code == 400
    assert "Price" in invalid.json()["detail"]


def test_stock_movements_and_summary(tmp_path: Path) -> None:
    client = _client(tmp_path)
    product = _product(client, "medicine", quantity=12, expiry_date="2025-01-01")
    product_id = product["id"]

    used = client.post(f"/api/medicine/stock/{product_id}/history", json={"stock_change": 4, "update_date": "2024-03-05"})
    assert used.status_code == 201
    body = used.json()
    assert body["entry"]["current_stock_before"] == 12
    assert body["entry"]["current_stock_after"] == 8
    assert body["product"]["balance_stock"] == 8
    assert body["product"]["stock_status"] == "low_stock"

    too_much = client.post(f"/api/medicine/stock/{product_id}/history", json={"stock_change": 9})
    assert too_much.status_code == 400

    history = client.get(f"/api/medicine/stock/{product_id}/history").json()
    assert history["meta"]["count"] == 1
    entry_id = history["items"][0]["id"]

    stock = client.get("/api/medicine/stock", params={"month": 3, "year": 2024}).json()
    assert stock["meta"]["summary"]["products"] == 1
    assert stock["meta"]["summary"]["low_stock"] == 1

    deleted = client.delete(f"/api/medicine/stock/history/{entry_id}").json()
    assert deleted["product"]["balance_stock"] == 12

    client.post(f"/api/medicine/stock/{product_id}/history", json={"stock_change": 2, "stock_type": "expired"})
    reset = client.post(f"/api/medicine/stock/{product_id}/reset").json()
    assert reset["removed"] == 1
    assert reset["product"]["used_stock"] == 0


def test_stock_carry_forward_and_expired_status(tmp_path: Path) -> None:
    client = _client(tmp_path, today=date(2024, 3, 20))
    _product(client, "medicine", name="Old Stock", purchase_date="2024-01-10", expiry_date="2024-02-01")
    _product(client, "medicine", name="Empty Stock", purchase_date="2024-02-10", quantity=1)
    empty = client.get("/api/medicine/products", params={"search": "empty"}).json()["items"][0]
    client.post(f"/api/medicine/stock/{empty['id']}/history", json={"stock_change": 1})

    march = client.get("/api/medicine/stock", params={"month": 3, "year": 2024}).json()
    assert [item["name"] for item in march["items"]] == ["Old Stock"]
    assert march["items"][0]["display_status"] == "expired"

    expired = client.get("/api/medicine/stock", params={"status": "expired"}).json()
    assert expired["meta"]["total"] == 1

    february = client.get("/api/medicine/stock", params={"month": 2, "year": 2024}).json()
    assert [item["name"] for item in february["items"]] == ["Empty Stock"]


def test_settlements_update_accounts(tmp_path: Path) -> None:
    client = _client(tmp_path)
    product = _product(client, "general", price=10, quantity=10)
    product_id = product["id"]

    first = client.post(
        f"/api/general/accounts/{product_id}/settlements",
        json={"amount": 30, "payment_date": "2024-03-10", "payment_type": "upi"},
    )
    assert first.status_code == 201
    assert first.json()["product"]["payment_status"] == "partial"

    over = client.post(
        f"/api/general/accounts/{product_id}/settlements",
        json={"amount": 71, "payment_date": "2024-03-11"},
    )
    assert over.status_code == 400

    missing_date = client.post(f"/api/general/accounts/{product_id}/settlements", json={"amount": 5})
    assert missing_date.status_code == 422

    accounts = client.get("/api/general/accounts", params={"status": "partial"}).json()
    assert accounts["meta"]["summary"]["balance_amount"] == 70.0
    assert accounts["items"][0]["settlement_amount"] == 30.0

    history = client.get(f"/api/general/accounts/{product_id}/settlements").json()
    entry_id = history["items"][0]["id"]
    deleted = client.delete(f"/api/general/accounts/settlements/{entry_id}").json()
    assert deleted["product"]["payment_status"] == "pending"


def test_ledger_invariants_map_to_client_errors(tmp_path: Path) -> None:
    client = _client(tmp_path)
    product_id = _product(client, "medicine", price=10, quantity=10)["id"]
    history_url = f"/api/medicine/stock/{product_id}/history"

    assert client.post(history_url, json={"stock_change": 6}).status_code == 201

    shrink = client.put(f"/api/medicine/products/{product_id}", json={"quantity": 5})
    assert shrink.status_code == 409
    assert shrink.json()["error"] == "conflict"

    for movement in (
        {"stock_change": 0, "stock_type": "purchased"},
        {"stock_change": -1, "stock_type": "returned"},
        {"stock_change": -5, "stock_type": "adjusted"},
    ):
        response = client.post(history_url, json=movement)
        assert response.status_code == 400, movement

    settlements_url = f"/api/medicine/accounts/{product_id}/settlements"
    over = client.post(settlements_url, json={"amount": 100.01, "payment_date": "2024-03-10"})
    assert over.status_code == 400
    exact = client.post(settlements_url, json={"amount": 100, "payment_date": "2024-03-10"})
    assert exact.status_code == 201
    assert exact.json()["product"]["payment_status"] == "completed"

    entry_id = client.get(history_url).json()["items"][0]["id"]
    wrong_domain = client.delete(f"/api/grocery/stock/history/{entry_id}")
    assert wrong_domain.status_code == 404
    assert wrong_domain.json()["detail"] == f"stock entry {entry_id} not found"

    product = client.get(f"/api/medicine/products/{product_id}").json()
    assert product["quantity"] == 10
    assert product["balance_stock"] == 4


def test_csv_exports_use_bom_and_month_filename(tmp_path: Path) -> None:
    client = _client(tmp_path)
    _product(client, "grocery")

    response = client.get("/api/grocery/stock/export.csv", params={"month": 3, "year": 2024})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="grocery_stock_March_2024.csv"' in response.headers["content-disposition"]
    text = response.text
    assert text.startswith("\ufeff")
    rows = list(csv.DictReader(io.StringIO(text.lstrip("\ufeff"))))
    assert rows[0]["GR ID"] == "GR0001"
    assert rows[0]["Balance"] == "40"
    assert rows[0]["S No"] == "1"


def test_csv_export_requires_api_key_when_configured(tmp_path: Path) -> None:
    client = _client(tmp_path, config=ConsoleConfig(api_key="secret"))

    assert client.get("/api/roles/export.csv").status_code == 401
    assert client.get("/api/roles/export.csv", params={"api_key": "secret"}).status_code == 200


def test_roles_and_staff_permissions(tmp_path: Path) -> None:
    client = _client(tmp_path)

    pages = client.get("/api/permissions").json()
    assert "medicine-stock" in pages["permissions"]

    role = client.post("/api/roles", json={"name": "Pharmacist", "permissions": ["medicine-stock", "bogus"]})
    assert role.status_code == 201
    assert role.json()["permissions"] == ["medicine-stock"]
    assert role.json()["permissions_count"] == 1

    staff = client.post("/api/staff", json={"name": "Asha", "email": "asha@clinic.example", "role": "Pharmacist", "salary": 1200})
    assert staff.status_code == 201
    staff_id = staff.json()["id"]
    assert staff_id == "STF001"

    permissions = client.get(f"/api/staff/{staff_id}/permissions").json()
    assert permissions["permissions"] == ["medicine-stock"]
    check = client.get("/api/roles/check", params={"role": "Pharmacist", "page": "staff-list"}).json()
    assert check["allowed"] is False

    blocked = client.delete(f"/api/roles/{role.json()['id']}")
    assert blocked.status_code == 409


def test_staff_soft_delete_restore_and_salary(tmp_path: Path) -> None:
    client = _client(tmp_path)
    staff_id = client.post("/api/staff", json={"name": "Asha", "salary": 1000}).json()["id"]
    client.post("/api/staff", json={"name": "Ben", "salary": 500, "totalPaid": 500})

    paid = client.put(f"/api/staff/{staff_id}/salary-payment", json={"total_paid": 400, "payment_mode": "cash"})
    assert paid.json()["pending_salary"] == 600.0

    renamed = client.put(f"/api/staff/{staff_id}", json={"name": "Asha K", "department": "Pharmacy"})
    assert renamed.status_code == 200
    assert renamed.json()["salary"] == 1000.0
    assert renamed.json()["pending_salary"] == 600.0

    summary = client.get("/api/staff/salary-summary").json()["summary"]
    assert summary["total_pending"] == 600.0
    assert summary["fully_paid"] == 1

    deleted = client.delete(f"/api/staff/{staff_id}", params={"deleted_by": "manager"})
    assert deleted.json()["item"]["deleted_by"] == "manager"
    assert client.get(f"/api/staff/{staff_id}").status_code == 404
    assert [item["id"] for item in client.get("/api/staff/deleted").json()["items"]] == [staff_id]
    assert client.get("/api/staff").json()["meta"]["total"] == 1

    restored = client.put(f"/api/staff/{staff_id}/restore")
    assert restored.json()["status"] == "restored"
    assert client.get("/api/staff").json()["meta"]["total"] == 2


def test_dashboard_screens_render(tmp_path: Path) -> None:
    client = _client(tmp_path)

    index = client.get("/dashboard")
    assert index.status_code == 200
    assert "/dashboard/medicine-stock" in index.text

    screen = client.get("/dashboard/medicine-accounts")
    assert screen.status_code == 200
    assert screen.headers["content-type"].startswith("text/html")
    assert "Medicine Accounts" in screen.text
    assert '"/api/medicine/accounts"' in screen.text
    assert "Showing ${meta.start} to ${meta.end} of ${total}" in screen.text

    stock = client.get("/dashboard/grocery-stock")
    assert '"actions": ["use", "history", "reset"]' in stock.text
    assert 'id="history-dialog"' in stock.text
    assert "`${CONFIG.api}/history/${entry.id}`" in stock.text

    staff = client.get("/dashboard/staff")
    assert 'if (value !== "") payload[key] = Number(value);' in staff.text

    assert client.get("/dashboard/unknown").status_code == 404


def test_unexpected_errors_return_json_500(tmp_path: Path, caplog) -> None:
    db_path = tmp_path / "console.db"
    create_all(db_path)
    calls = {"count": 0}

    @contextmanager
    def failing_session():
        calls["count"] += 1
        raise RuntimeError("database unavailable")
        yield  # pragma: no cover

    app = create_app(
        session_provider=failing_session,
        config=ConsoleConfig(),
        logger=logging.getLogger("carestore.web.test"),
    )
    client = TestClient(app, raise_server_exceptions=False)

    with caplog.at_level(logging.ERROR, logger="carestore.web.test"):
        response = client.get("/api/roles")

    assert response.status_code == 500
    assert response.json() == {"error": "internal", "detail": "see server logs"}
    assert calls["count"] == 1
    assert "Unhandled application error" in caplog.text


def test_session_provider_is_used_for_requests(tmp_path: Path) -> None:
    db_path = tmp_path / "provided.db"
    create_all(db_path)

    @contextmanager
    def provided_session():
        with session_scope(db_path) as session:
            yield session

    app = create_app(session_provider=provided_session, config=ConsoleConfig())
    client = TestClient(app)
    client.post("/api/roles", json={"name": "Cashier"})

    with session_scope(db_path) as session:
        assert RoleService(session).find("cashier") is not None
