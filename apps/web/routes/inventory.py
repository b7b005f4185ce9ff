"""Category, supplier, product, stock and account endpoints for each domain."""
from __future__ import annotations

from fastapi import Depends, FastAPI, Query
from fastapi.responses import JSONResponse, Response

from services.catalog import CatalogService, validate_domain
from services.ledger import SettlementLedger, StockLedger

from .. import export
from ..schemas import (
    CategoryPayload,
    ProductPayload,
    SettlementPayload,
    StockMovementPayload,
    SupplierPayload,
)
from ..serializers import (
    serialize_category,
    serialize_product,
    serialize_settlement,
    serialize_stock_entry,
    serialize_supplier,
)
from ..views import ListQuery, account_summary, stock_summary
from .context import RouteContext

CATEGORY_SEARCH = ("name", "description")
SUPPLIER_SEARCH = ("name", "contact_person", "email", "phone", "address")
PRODUCT_SEARCH = ("code", "name", "category", "supplier", "description", "manufacturer", "batch_number")
STOCK_SEARCH = ("code", "name", "category", "supplier")


def register_inventory_routes(app: FastAPI, ctx: RouteContext) -> None:
    """Attach the per-domain inventory endpoints to ``app``."""

    def _catalog(session) -> CatalogService:
        return CatalogService(session, thresholds=ctx.low_stock)

    # Categories -----------------------------------------------------------------

    def _category_rows(domain: str, query: ListQuery) -> tuple[list, list]:
        with ctx.session() as session:
            records = [serialize_category(item) for item in _catalog(session).list_categories(domain)]
        return records, ctx.filtered(records, query, search_fields=CATEGORY_SEARCH)

    @app.get("/api/{domain}/categories/export.csv")
    def export_categories(
        domain: str,
        query: ListQuery = Depends(ctx.list_params),
        api_key: str | None = Query(None),
    ) -> Response:
        ctx.require_api_key(api_key)
        _, rows = _category_rows(domain, query)
        text = export.render_csv(export.build_rows(rows, export.category_row), export.CATEGORY_HEADERS)
        return export.csv_response(text, filename=export.export_filename(f"{domain}_categories", query.month, query.year))

    @app.get("/api/{domain}/categories", response_class=JSONResponse)
    def list_categories(domain: str, query: ListQuery = Depends(ctx.list_params)) -> dict[str, object]:
        records, rows = _category_rows(domain, query)
        return ctx.list_response(records, rows, query)

    @app.post("/api/{domain}/categories", status_code=201)
    def create_category(domain: str, payload: CategoryPayload) -> dict[str, object]:
        with ctx.session() as session:
            category = _catalog(session).create_category(domain, payload.model_dump(exclude_unset=True))
            data = serialize_category(category)
        return data

    @app.put("/api/{domain}/categories/{category_id}")
    def update_category(domain: str, category_id: int, payload: CategoryPayload) -> dict[str, object]:
        with ctx.session() as session:
            category = _catalog(session).update_category(
                domain, category_id, payload.model_dump(exclude_unset=True)
            )
            data = serialize_category(category)
        return data

    @app.delete("/api/{domain}/categories/{category_id}")
    def delete_category(domain: str, category_id: int) -> dict[str, object]:
        with ctx.session() as session:
            _catalog(session).delete_category(domain, category_id)
        return {"status": "deleted", "id": category_id}

    # Suppliers ------------------------------------------------------------------

    def _supplier_rows(domain: str, query: ListQuery) -> tuple[list, list]:
        with ctx.session() as session:
            records = [serialize_supplier(item) for item in _catalog(session).list_suppliers(domain)]
        return records, ctx.filtered(records, query, search_fields=SUPPLIER_SEARCH)

    @app.get("/api/{domain}/suppliers/export.csv")
    def export_suppliers(
        domain: str,
        query: ListQuery = Depends(ctx.list_params),
        api_key: str | None = Query(None),
    ) -> Response:
        ctx.require_api_key(api_key)
        _, rows = _supplier_rows(domain, query)
        text = export.render_csv(export.build_rows(rows, export.supplier_row), export.SUPPLIER_HEADERS)
        return export.csv_response(text, filename=export.export_filename(f"{domain}_suppliers", query.month, query.year))

    @app.get("/api/{domain}/suppliers", response_class=JSONResponse)
    def list_suppliers(domain: str, query: ListQuery = Depends(ctx.list_params)) -> dict[str, object]:
        records, rows = _supplier_rows(domain, query)
        return ctx.list_response(records, rows, query)

    @app.post("/api/{domain}/suppliers", status_code=201)
    def create_supplier(domain: str, payload: SupplierPayload) -> dict[str, object]:
        with ctx.session() as session:
            supplier = _catalog(session).create_supplier(domain, payload.model_dump(exclude_unset=True))
            data = serialize_supplier(supplier)
        return data

    @app.put("/api/{domain}/suppliers/{supplier_id}")
    def update_supplier(domain: str, supplier_id: int, payload: SupplierPayload) -> dict[str, object]:
        with ctx.session() as session:
            supplier = _catalog(session).update_supplier(
                domain, supplier_id, payload.model_dump(exclude_unset=True)
            )
            data = serialize_supplier(supplier)
        return data

    @app.delete("/api/{domain}/suppliers/{supplier_id}")
    def delete_supplier(domain: str, supplier_id: int) -> dict[str, object]:
        with ctx.session() as session:
            _catalog(session).delete_supplier(domain, supplier_id)
        return {"status": "deleted", "id": supplier_id}

    # Products -------------------------------------------------------------------

    def _product_records(domain: str) -> list:
        today = ctx.today()
        with ctx.session() as session:
            return [serialize_product(item, today=today) for item in _catalog(session).list_products(domain)]

    def _product_rows(domain: str, query: ListQuery) -> tuple[list, list]:
        records = _product_records(domain)
        rows = ctx.filtered(
            records,
            query,
            search_fields=PRODUCT_SEARCH,
            date_field="purchase_date",
            code_field="code",
        )
        return records, rows

    @app.get("/api/{domain}/products/export.csv")
    def export_products(
        domain: str,
        query: ListQuery = Depends(ctx.list_params),
        api_key: str | None = Query(None),
    ) -> Response:
        ctx.require_api_key(api_key)
        _, rows = _product_rows(domain, query)
        headers = export.MEDICINE_PRODUCT_HEADERS if validate_domain(domain) == "medicine" else export.PRODUCT_HEADERS
        text = export.render_csv(export.build_rows(rows, export.product_row), headers)
        return export.csv_response(text, filename=export.export_filename(f"{domain}_products", query.month, query.year))

    @app.get("/api/{domain}/products", response_class=JSONResponse)
    def list_products(domain: str, query: ListQuery = Depends(ctx.list_params)) -> dict[str, object]:
        records, rows = _product_rows(domain, query)
        return ctx.list_response(records, rows, query)

    @app.get("/api/{domain}/products/{product_id}", response_class=JSONResponse)
    def get_product(domain: str, product_id: int) -> dict[str, object]:
        with ctx.session() as session:
            data = serialize_product(_catalog(session).get_product(domain, product_id), today=ctx.today())
        return data

    @app.post("/api/{domain}/products", status_code=201)
    def create_product(domain: str, payload: ProductPayload) -> dict[str, object]:
        with ctx.session() as session:
            product = _catalog(session).create_product(domain, payload.model_dump(exclude_unset=True))
            data = serialize_product(product, today=ctx.today())
        return data

    @app.put("/api/{domain}/products/{product_id}")
    def update_product(domain: str, product_id: int, payload: ProductPayload) -> dict[str, object]:
        with ctx.session() as session:
            product = _catalog(session).update_product(domain, product_id, payload.model_dump(exclude_unset=True))
            data = serialize_product(product, today=ctx.today())
        return data

    @app.delete("/api/{domain}/products/{product_id}")
    def delete_product(domain: str, product_id: int) -> dict[str, object]:
        with ctx.session() as session:
            _catalog(session).delete_product(domain, product_id)
        return {"status": "deleted", "id": product_id}

    # Stock ----------------------------------------------------------------------

    def _stock_rows(domain: str, query: ListQuery) -> tuple[list, list]:
        records = _product_records(domain)
        rows = ctx.filtered(
            records,
            query,
            search_fields=STOCK_SEARCH,
            date_field="purchase_date",
            status_field="display_status",
            carry_forward=True,
            code_field="code",
        )
        return records, rows

    @app.get("/api/{domain}/stock/export.csv")
    def export_stock(
        domain: str,
        query: ListQuery = Depends(ctx.list_params),
        api_key: str | None = Query(None),
    ) -> Response:
        ctx.require_api_key(api_key)
        _, rows = _stock_rows(domain, query)
        headers = export.STOCK_HEADERS[validate_domain(domain)]
        text = export.render_csv(export.build_rows(rows, export.stock_row), headers)
        return export.csv_response(text, filename=export.export_filename(f"{domain}_stock", query.month, query.year))

    @app.get("/api/{domain}/stock", response_class=JSONResponse)
    def list_stock(domain: str, query: ListQuery = Depends(ctx.list_params)) -> dict[str, object]:
        records, rows = _stock_rows(domain, query)
        return ctx.list_response(records, rows, query, summary=stock_summary(rows), status_field="display_status")

    @app.get("/api/{domain}/stock/{product_id}/history", response_class=JSONResponse)
    def stock_history(domain: str, product_id: int) -> dict[str, object]:
        domain = validate_domain(domain)
        with ctx.session() as session:
            entries = StockLedger(session, thresholds=ctx.low_stock).history(product_id, domain=domain)
            product = _catalog(session).get_product(domain, product_id)
            items = [serialize_stock_entry(entry) for entry in entries]
            product_data = serialize_product(product, today=ctx.today())
        return {"items": items, "meta": {"count": len(items), "product": product_data}}

    @app.post("/api/{domain}/stock/{product_id}/history", status_code=201)
    def record_stock(domain: str, product_id: int, payload: StockMovementPayload) -> dict[str, object]:
        domain = validate_domain(domain)
        with ctx.session() as session:
            entry = StockLedger(session, thresholds=ctx.low_stock).record(
                product_id,
                stock_change=payload.stock_change,
                stock_type=payload.stock_type,
                update_date=payload.update_date,
                description=payload.description,
                domain=domain,
            )
            data = {
                "entry": serialize_stock_entry(entry),
                "product": serialize_product(_catalog(session).get_product(domain, product_id), today=ctx.today()),
            }
        return data

    @app.delete("/api/{domain}/stock/history/{entry_id}")
    def delete_stock_entry(domain: str, entry_id: int) -> dict[str, object]:
        domain = validate_domain(domain)
        with ctx.session() as session:
            product = StockLedger(session, thresholds=ctx.low_stock).delete(entry_id, domain=domain)
            data = {"status": "deleted", "id": entry_id, "product": serialize_product(product, today=ctx.today())}
        return data

    @app.post("/api/{domain}/stock/{product_id}/reset")
    def reset_usage(domain: str, product_id: int) -> dict[str, object]:
        domain = validate_domain(domain)
        with ctx.session() as session:
            product, removed = StockLedger(session, thresholds=ctx.low_stock).reset_usage(product_id, domain=domain)
            data = {"removed": removed, "product": serialize_product(product, today=ctx.today())}
        return data

    # Accounts -------------------------------------------------------------------

    def _account_rows(domain: str, query: ListQuery) -> tuple[list, list]:
        records = _product_records(domain)
        rows = ctx.filtered(
            records,
            query,
            search_fields=STOCK_SEARCH,
            date_field="purchase_date",
            status_field="payment_status",
            code_field="code",
        )
        return records, rows

    @app.get("/api/{domain}/accounts/export.csv")
    def export_accounts(
        domain: str,
        query: ListQuery = Depends(ctx.list_params),
        api_key: str | None = Query(None),
    ) -> Response:
        ctx.require_api_key(api_key)
        _, rows = _account_rows(domain, query)
        text = export.render_csv(export.build_rows(rows, export.account_row), export.ACCOUNT_HEADERS)
        return export.csv_response(text, filename=export.export_filename(f"{domain}_accounts", query.month, query.year))

    @app.get("/api/{domain}/accounts", response_class=JSONResponse)
    def list_accounts(domain: str, query: ListQuery = Depends(ctx.list_params)) -> dict[str, object]:
        records, rows = _account_rows(domain, query)
        return ctx.list_response(
            records, rows, query, summary=account_summary(rows), status_field="payment_status"
        )

    @app.get("/api/{domain}/accounts/{product_id}/settlements", response_class=JSONResponse)
    def settlement_history(domain: str, product_id: int) -> dict[str, object]:
        domain = validate_domain(domain)
        with ctx.session() as session:
            entries = SettlementLedger(session).history(product_id, domain=domain)
            product = _catalog(session).get_product(domain, product_id)
            items = [serialize_settlement(entry) for entry in entries]
            product_data = serialize_product(product, today=ctx.today())
        return {"items": items, "meta": {"count": len(items), "product": product_data}}

    @app.post("/api/{domain}/accounts/{product_id}/settlements", status_code=201)
    def record_settlement(domain: str, product_id: int, payload: SettlementPayload) -> dict[str, object]:
        domain = validate_domain(domain)
        with ctx.session() as session:
            entry = SettlementLedger(session).record(
                product_id,
                amount=payload.amount,
                payment_date=payload.payment_date,
                payment_type=payload.payment_type,
                description=payload.description,
                domain=domain,
            )
            data = {
                "entry": serialize_settlement(entry),
                "product": serialize_product(_catalog(session).get_product(domain, product_id), today=ctx.today()),
            }
        return data

    @app.delete("/api/{domain}/accounts/settlements/{entry_id}")
    def delete_settlement(domain: str, entry_id: int) -> dict[str, object]:
        domain = validate_domain(domain)
        with ctx.session() as session:
            product = SettlementLedger(session).delete(entry_id, domain=domain)
            data = {"status": "deleted", "id": entry_id, "product": serialize_product(product, today=ctx.today())}
        return data


__all__ = ["register_inventory_routes"]
