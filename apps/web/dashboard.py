"""HTML screens driven by the JSON API."""
from __future__ import annotations

import html
import json
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from packages.db import DOMAINS

Column = Tuple[str, str]
FormField = Tuple[str, str, str]


@dataclass
class Screen:
    """Table, filters and dialog definition for one console screen."""

    slug: str
    title: str
    api: str
    columns: List[Column]
    form: List[FormField] = field(default_factory=list)
    id_field: str = "id"
    status_options: List[str] = field(default_factory=lambda: ["active", "inactive"])
    summary: List[Column] = field(default_factory=list)
    actions: List[str] = field(default_factory=list)
    can_create: bool = True

    def to_config(self) -> dict[str, object]:
        return {
            "slug": self.slug,
            "title": self.title,
            "api": self.api,
            "columns": [list(column) for column in self.columns],
            "form": [list(item) for item in self.form],
            "idField": self.id_field,
            "statusOptions": self.status_options,
            "summary": [list(item) for item in self.summary],
            "actions": self.actions,
            "canCreate": self.can_create,
        }


_CATEGORY_FORM: List[FormField] = [
    ("name", "Category Name", "text"),
    ("description", "Description", "textarea"),
    ("status", "Status", "status"),
]
_SUPPLIER_FORM: List[FormField] = [
    ("name", "Company Name", "text"),
    ("contact_person", "Contact Person", "text"),
    ("email", "Email", "email"),
    ("phone", "Phone", "text"),
    ("address", "Address", "textarea"),
    ("status", "Status", "status"),
]
_PRODUCT_FORM: List[FormField] = [
    ("name", "Name", "text"),
    ("category", "Category", "text"),
    ("supplier", "Supplier", "text"),
    ("price", "Price", "number"),
    ("quantity", "Quantity", "number"),
    ("unit", "Unit", "text"),
    ("purchase_date", "Purchase Date", "date"),
    ("description", "Description", "textarea"),
    ("status", "Status", "status"),
]
_MEDICINE_FORM: List[FormField] = _PRODUCT_FORM[:3] + [
    ("manufacturer", "Manufacturer", "text"),
    ("batch_number", "Batch Number", "text"),
    ("expiry_date", "Expiry Date", "date"),
] + _PRODUCT_FORM[3:]


def _domain_screens(domain: str) -> List[Screen]:
    label = domain.capitalize()
    api = f"/api/{domain}"
    product_columns: List[Column] = [
        ("code", "ID"),
        ("purchase_date", "Date"),
        ("name", "Name"),
        ("category", "Category"),
        ("supplier", "Supplier"),
        ("price", "Price"),
        ("quantity", "Quantity"),
        ("status", "Status"),
    ]
    if domain == "medicine":
        product_columns.insert(5, ("batch_number", "Batch"))
        product_columns.insert(6, ("expiry_date", "Expiry"))
    return [
        Screen(
            slug=f"{domain}-categories",
            title=f"{label} Categories",
            api=f"{api}/categories",
            columns=[("created_at", "Date"), ("name", "Category Name"), ("description", "Description"), ("status", "Status")],
            form=_CATEGORY_FORM,
        ),
        Screen(
            slug=f"{domain}-suppliers",
            title=f"{label} Suppliers",
            api=f"{api}/suppliers",
            columns=[
                ("created_at", "Date"),
                ("name", "Company Name"),
                ("contact_person", "Contact Person"),
                ("email", "Email"),
                ("phone", "Phone"),
                ("status", "Status"),
            ],
            form=_SUPPLIER_FORM,
        ),
        Screen(
            slug=f"{domain}-products",
            title=f"{label} Products",
            api=f"{api}/products",
            columns=product_columns,
            form=_MEDICINE_FORM if domain == "medicine" else _PRODUCT_FORM,
        ),
        Screen(
            slug=f"{domain}-stock",
            title=f"{label} Stock",
            api=f"{api}/stock",
            columns=[
                ("code", "ID"),
                ("purchase_date", "Date"),
                ("name", "Product Name"),
                ("category", "Category"),
                ("current_stock", "Current"),
                ("used_stock", "Used"),
                ("balance_stock", "Balance"),
                ("display_status", "Status"),
            ],
            status_options=["in_stock", "low_stock", "out_of_stock", "expired"],
            summary=[
                ("products", "Products"),
                ("balance_stock", "Balance Units"),
                ("low_stock", "Low Stock"),
                ("out_of_stock", "Out of Stock"),
            ],
            actions=["use", "history", "reset"],
            can_create=False,
        ),
        Screen(
            slug=f"{domain}-accounts",
            title=f"{label} Accounts",
            api=f"{api}/accounts",
            columns=[
                ("code", "ID"),
                ("name", "Product Name"),
                ("supplier", "Supplier"),
                ("purchase_amount", "Purchase"),
                ("settlement_amount", "Settled"),
                ("balance_amount", "Balance"),
                ("payment_status", "Status"),
            ],
            status_options=["pending", "partial", "completed"],
            summary=[
                ("purchase_amount", "Purchased"),
                ("settlement_amount", "Settled"),
                ("balance_amount", "Outstanding"),
                ("pending", "Pending"),
            ],
            actions=["pay"],
            can_create=False,
        ),
    ]


SCREENS: Dict[str, Screen] = {screen.slug: screen for domain in DOMAINS for screen in _domain_screens(domain)}
SCREENS["roles"] = Screen(
    slug="roles",
    title="Role Management",
    api="/api/roles",
    columns=[("name", "Role Name"), ("description", "Description"), ("permissions_count", "Permissions"), ("status", "Status")],
    form=[
        ("name", "Role Name", "text"),
        ("description", "Description", "textarea"),
        ("permissions", "Permissions (comma separated page ids)", "list"),
        ("status", "Status", "status"),
    ],
)
SCREENS["staff"] = Screen(
    slug="staff",
    title="Staff",
    api="/api/staff",
    columns=[
        ("id", "Staff ID"),
        ("name", "Name"),
        ("email", "Email"),
        ("role", "Role"),
        ("department", "Department"),
        ("salary", "Salary"),
        ("status", "Status"),
    ],
    form=[
        ("name", "Name", "text"),
        ("email", "Email", "email"),
        ("phone", "Phone", "text"),
        ("role", "Role", "text"),
        ("department", "Department", "text"),
        ("join_date", "Join Date", "date"),
        ("salary", "Salary", "number"),
        ("address", "Address", "textarea"),
        ("status", "Status", "status"),
    ],
    status_options=["Active", "Inactive"],
    actions=["salary"],
)


def get_screen(slug: str) -> Optional[Screen]:
    return SCREENS.get(slug)


def render_index() -> str:
    links = "\n".join(
        f'      <li><a href="/dashboard/{html.escape(slug)}">{html.escape(screen.title)}</a></li>'
        for slug, screen in SCREENS.items()
    )
    return _INDEX_TEMPLATE.replace("__LINKS__", links)


def render_screen(screen: Screen) -> str:
    config = json.dumps(screen.to_config()).replace("</", "<\\/")
    return (
        _SCREEN_TEMPLATE.replace("__TITLE__", html.escape(screen.title))
        .replace("__CONFIG__", config)
    )


_STYLE = """
    :root { color-scheme: light dark; font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif; }
    body { margin: 0; padding: 1.5rem; background: #f7f7f7; color: #111; }
    header { margin-bottom: 1.25rem; }
    h1 { font-size: 1.6rem; margin: 0 0 0.25rem 0; }
    p.subtitle { margin: 0; color: #555; }
    .crm-overview { display: grid; grid-template-columns: repeat(auto-fit, minmax(180px, 1fr)); gap: 1rem; margin-bottom: 1.25rem; }
    .crm-card { background: #fff; border-radius: 8px; padding: 1rem; box-shadow: 0 16px 24px rgba(15, 23, 42, 0.08); }
    .crm-card h2 { margin: 0; font-size: 0.85rem; letter-spacing: 0.02em; text-transform: uppercase; color: #475569; }
    .crm-metric { font-size: 1.6rem; font-weight: 600; margin: 0.35rem 0 0 0; }
    .crm-controls { display: flex; flex-wrap: wrap; gap: 0.75rem; margin-bottom: 1rem; align-items: flex-end; }
    .crm-controls label { display: flex; flex-direction: column; font-size: 0.9rem; gap: 0.25rem; }
    input, select, textarea, button { padding: 0.4rem 0.6rem; font-size: 0.95rem; }
    button.primary { background: #2563eb; border: none; color: #fff; border-radius: 4px; cursor: pointer; }
    button.secondary { background: #e5e7eb; border: none; color: #111; border-radius: 4px; cursor: pointer; }
    button.danger { background: #fee2e2; border: none; color: #991b1b; border-radius: 4px; cursor: pointer; }
    table { width: 100%; border-collapse: collapse; background: #fff; border-radius: 6px; overflow: hidden; }
    th, td { padding: 0.6rem; text-align: left; border-bottom: 1px solid #e5e7eb; font-size: 0.9rem; }
    th { background: #f3f4f6; text-transform: uppercase; letter-spacing: 0.05em; font-size: 0.75rem; }
    .crm-pager { display: flex; justify-content: space-between; align-items: center; margin-top: 0.75rem; font-size: 0.9rem; }
    .pill { display: inline-flex; padding: 0.15rem 0.5rem; border-radius: 999px; font-size: 0.75rem; background: #e0f2fe; color: #0369a1; }
    .pill.low_stock, .pill.partial, .pill.pending { background: #fef3c7; color: #92400e; }
    .pill.out_of_stock, .pill.expired, .pill.inactive, .pill.Inactive { background: #fee2e2; color: #991b1b; }
    .pill.completed, .pill.in_stock, .pill.active, .pill.Active { background: #dcfce7; color: #166534; }
    #status { position: fixed; right: 1.5rem; bottom: 1.5rem; padding: 0.75rem 1rem; border-radius: 8px; border: 1px solid transparent; background: #f8fafc; }
    #status.hidden { display: none; }
    #status.error { border-color: #b91c1c; background: #fef2f2; color: #b91c1c; }
    #status.success { border-color: #0f766e; background: #ecfdf5; color: #0f766e; }
    #status.info { border-color: #2563eb; background: #eff6ff; color: #1d4ed8; }
    dialog form { display: grid; gap: 0.6rem; min-width: 22rem; }
    dialog label { display: flex; flex-direction: column; gap: 0.25rem; font-size: 0.9rem; }
    @media (prefers-color-scheme: dark) {
      body { background: #0f172a; color: #e2e8f0; }
      table, .crm-card { background: #1e293b; box-shadow: none; }
      th { background: #0f172a; }
      .crm-card h2 { color: #cbd5f5; }
      button.secondary { background: #334155; color: inherit; }
    }
"""

_INDEX_TEMPLATE = (
    """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>CareStore Console</title>
  <style>"""
    + _STYLE
    + """  </style>
</head>
<body>
  <header>
    <h1>CareStore Console</h1>
    <p class="subtitle">Inventory, suppliers, staff and role management.</p>
  </header>
  <ul>
__LINKS__
  </ul>
</body>
</html>
"""
).strip()

_SCREEN_TEMPLATE = (
    """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>__TITLE__ · CareStore Console</title>
  <style>"""
    + _STYLE
    + """  </style>
</head>
<body>
  <header>
    <h1>__TITLE__</h1>
    <p class="subtitle"><a href="/dashboard">All screens</a></p>
  </header>
  <section class="crm-overview" id="summary" aria-label="Summary"></section>
  <section class="crm-controls">
    <label>Search
      <input id="filter-search" type="search" placeholder="Search…">
    </label>
    <label>Status
      <select id="filter-status"><option value="">All statuses</option></select>
    </label>
    <label>Month
      <input id="filter-month" type="month">
    </label>
    <button class="secondary" id="refresh-btn" type="button">Refresh</button>
    <a id="export-link" class="secondary" href="#">Export CSV</a>
    <button class="primary" id="add-btn" type="button">Add</button>
  </section>
  <table>
    <thead><tr id="table-head"></tr></thead>
    <tbody id="table-body"><tr><td>Loading…</td></tr></tbody>
  </table>
  <div class="crm-pager">
    <span id="pager-info"></span>
    <span>
      <button class="secondary" id="prev-btn" type="button">Previous</button>
      <button class="secondary" id="next-btn" type="button">Next</button>
    </span>
  </div>
  <dialog id="record-dialog">
    <form id="record-form" method="dialog">
      <h2 id="dialog-title"></h2>
      <div id="form-fields"></div>
      <menu>
        <button class="secondary" value="cancel" type="button" id="cancel-btn">Cancel</button>
        <button class="primary" value="save" type="submit">Save</button>
      </menu>
    </form>
  </dialog>
  <dialog id="history-dialog">
    <h2 id="history-title"></h2>
    <table>
      <thead><tr><th>Date</th><th>Type</th><th>Change</th><th>Before</th><th>After</th><th>Notes</th><th></th></tr></thead>
      <tbody id="history-body"></tbody>
    </table>
    <menu>
      <button class="secondary" type="button" id="history-close-btn">Close</button>
    </menu>
  </dialog>
  <div id="status" role="status" aria-live="polite" class="hidden"></div>
  <script>
    const CONFIG = __CONFIG__;
    const state = { page: 1, meta: {}, items: [], editing: null, historyItem: null, filters: { search: "", status: "", month: "", year: "" } };

    function setStatus(message, tone) {
      const status = document.getElementById("status");
      status.className = tone || "";
      status.textContent = message || "";
      status.classList.toggle("hidden", !message);
      if (message && tone !== "error") {
        setTimeout(() => status.classList.add("hidden"), 3000);
      }
    }

    function queryString(extra) {
      const params = new URLSearchParams();
      for (const [key, value] of Object.entries(state.filters)) {
        if (value) params.append(key, value);
      }
      for (const [key, value] of Object.entries(extra || {})) {
        params.append(key, value);
      }
      const text = params.toString();
      return text ? `?${text}` : "";
    }

    async function request(url, options) {
      const response = await fetch(url, options);
      let payload = null;
      try {
        payload = await response.json();
      } catch (error) {
        payload = null;
      }
      if (!response.ok) {
        const detail = payload && payload.detail;
        const message = typeof detail === "string" ? detail : `Request failed with status ${response.status}`;
        throw new Error(message);
      }
      return payload;
    }

    async function load() {
      try {
        const payload = await request(CONFIG.api + queryString({ page: state.page }));
        state.items = Array.isArray(payload.items) ? payload.items : [];
        state.meta = payload.meta || {};
        renderTable();
        renderSummary();
        renderPager();
      } catch (error) {
        console.error(error);
        setStatus(`Failed to load ${CONFIG.title.toLowerCase()}: ${error.message}`, "error");
      }
      document.getElementById("export-link").href = CONFIG.api + "/export.csv" + queryString();
    }

    function formatValue(key, value) {
      if (value === null || value === undefined || value === "") return "-";
      if (/(_at|_date)$/.test(key) && typeof value === "string") {
        const [y, m, d] = value.slice(0, 10).split("-");
        return `${d}/${m}/${y}`;
      }
      if (/amount|price|salary/.test(key)) return Number(value).toFixed(2);
      return String(value);
    }

    function renderHead() {
      const head = document.getElementById("table-head");
      head.innerHTML = "<th>S No</th>";
      for (const [, label] of CONFIG.columns) {
        const th = document.createElement("th");
        th.textContent = label;
        head.appendChild(th);
      }
      head.appendChild(document.createElement("th"));
    }

    function renderTable() {
      const body = document.getElementById("table-body");
      body.innerHTML = "";
      if (!state.items.length) {
        body.innerHTML = `<tr><td colspan="${CONFIG.columns.length + 2}">No records match the selected filters.</td></tr>`;
        return;
      }
      const offset = (state.meta.start || 1) - 1;
      state.items.forEach((item, index) => {
        const row = document.createElement("tr");
        const serial = document.createElement("td");
        serial.textContent = String(offset + index + 1);
        row.appendChild(serial);
        for (const [key] of CONFIG.columns) {
          const cell = document.createElement("td");
          if (/status$/.test(key)) {
            const pill = document.createElement("span");
            pill.className = `pill ${item[key] || ""}`;
            pill.textContent = String(item[key] || "").replace(/_/g, " ");
            cell.appendChild(pill);
          } else {
            cell.textContent = formatValue(key, item[key]);
          }
          row.appendChild(cell);
        }
        row.appendChild(actionCell(item));
        body.appendChild(row);
      });
    }

    function actionButton(label, tone, handler) {
      const button = document.createElement("button");
      button.type = "button";
      button.className = tone;
      button.textContent = label;
      button.addEventListener("click", handler);
      return button;
    }

    function actionCell(item) {
      const cell = document.createElement("td");
      const id = item[CONFIG.idField];
      if (CONFIG.actions.includes("use")) {
        cell.appendChild(actionButton("Use", "secondary", () => recordUsage(item)));
      }
      if (CONFIG.actions.includes("history")) {
        cell.appendChild(actionButton("History", "secondary", () => openHistory(item)));
      }
      if (CONFIG.actions.includes("reset")) {
        cell.appendChild(actionButton("Reset", "secondary", () => resetUsage(item)));
      }
      if (CONFIG.actions.includes("pay")) {
        cell.appendChild(actionButton("Pay", "secondary", () => recordPayment(item)));
      }
      if (CONFIG.actions.includes("salary")) {
        cell.appendChild(actionButton("Salary", "secondary", () => recordSalary(item)));
      }
      if (CONFIG.form.length) {
        cell.appendChild(actionButton("Edit", "secondary", () => openDialog(item)));
        cell.appendChild(actionButton("Delete", "danger", () => removeRecord(id)));
      }
      return cell;
    }

    function renderSummary() {
      const container = document.getElementById("summary");
      container.innerHTML = "";
      const summary = state.meta.summary || {};
      for (const [key, label] of CONFIG.summary) {
        const card = document.createElement("article");
        card.className = "crm-card";
        card.innerHTML = `<h2></h2><p class="crm-metric"></p>`;
        card.querySelector("h2").textContent = label;
        card.querySelector("p").textContent = formatValue(key, summary[key] ?? 0);
        container.appendChild(card);
      }
    }

    function renderPager() {
      const meta = state.meta;
      const total = meta.total || 0;
      document.getElementById("pager-info").textContent = total
        ? `Showing ${meta.start} to ${meta.end} of ${total}`
        : "No records";
      document.getElementById("prev-btn").disabled = (meta.page || 1) <= 1;
      document.getElementById("next-btn").disabled = (meta.page || 1) >= (meta.total_pages || 1);
      state.page = meta.page || 1;
    }

    function openDialog(item) {
      state.editing = item || null;
      document.getElementById("dialog-title").textContent = `${item ? "Edit" : "Add"} ${CONFIG.title}`;
      const container = document.getElementById("form-fields");
      container.innerHTML = "";
      for (const [key, label, type] of CONFIG.form) {
        const wrapper = document.createElement("label");
        wrapper.textContent = label;
        let input;
        if (type === "textarea") {
          input = document.createElement("textarea");
        } else if (type === "status") {
          input = document.createElement("select");
          for (const option of CONFIG.statusOptions) {
            const element = document.createElement("option");
            element.value = option;
            element.textContent = option;
            input.appendChild(element);
          }
        } else {
          input = document.createElement("input");
          input.type = type === "list" ? "text" : type;
          if (type === "number") input.step = "any";
        }
        input.name = key;
        const current = item ? item[key] : null;
        if (current !== null && current !== undefined) {
          input.value = Array.isArray(current) ? current.join(",") : String(current).slice(0, type === "date" ? 10 : undefined);
        }
        wrapper.appendChild(input);
        container.appendChild(wrapper);
      }
      document.getElementById("record-dialog").showModal();
    }

    function formPayload() {
      const payload = {};
      for (const [key, , type] of CONFIG.form) {
        const input = document.querySelector(`#form-fields [name="${key}"]`);
        const value = input.value.trim();
        if (value === "" && state.editing === null) continue;
        if (type === "number") {
          // blank keeps the stored value on edit
          if (value !== "") payload[key] = Number(value);
        }
        else if (type === "list") payload[key] = value ? value.split(",").map((part) => part.trim()).filter(Boolean) : [];
        else payload[key] = value === "" ? null : value;
      }
      return payload;
    }

    async function saveRecord(event) {
      event.preventDefault();
      const editing = state.editing;
      const url = editing ? `${CONFIG.api}/${encodeURIComponent(editing[CONFIG.idField])}` : CONFIG.api;
      try {
        await request(url, {
          method: editing ? "PUT" : "POST",
          headers: { "Content-Type": "application/json" },
          body: JSON.stringify(formPayload())
        });
        document.getElementById("record-dialog").close();
        setStatus(editing ? "Record updated." : "Record created.", "success");
        load();
      } catch (error) {
        setStatus(error.message, "error");
      }
    }

    async function removeRecord(id) {
      if (!confirm("Delete this record?")) return;
      try {
        await request(`${CONFIG.api}/${encodeURIComponent(id)}`, { method: "DELETE" });
        setStatus("Record deleted.", "success");
        load();
      } catch (error) {
        setStatus(error.message, "error");
      }
    }

    async function postJson(url, body, message) {
      try {
        await request(url, {
          method: "POST",
          headers: { "Content-Type": "application/json" },
          body: JSON.stringify(body || {})
        });
        setStatus(message, "success");
        load();
      } catch (error) {
        setStatus(error.message, "error");
      }
    }

    function recordUsage(item) {
      const raw = prompt(`Units used for ${item.name} (available ${item.balance_stock})`);
      if (raw === null) return;
      const value = Number(raw);
      if (!Number.isFinite(value) || value <= 0) {
        setStatus("Enter a positive number of units.", "error");
        return;
      }
      postJson(`${CONFIG.api}/${item.id}/history`, { stock_change: value, stock_type: "used" }, "Usage recorded.");
    }

    async function openHistory(item) {
      state.historyItem = item;
      document.getElementById("history-title").textContent = `Stock history: ${item.name}`;
      const body = document.getElementById("history-body");
      body.innerHTML = `<tr><td colspan="7">Loading…</td></tr>`;
      const dialog = document.getElementById("history-dialog");
      if (!dialog.open) dialog.showModal();
      try {
        const payload = await request(`${CONFIG.api}/${item.id}/history`);
        renderHistory(Array.isArray(payload.items) ? payload.items : []);
      } catch (error) {
        body.innerHTML = "";
        setStatus(`Failed to load history: ${error.message}`, "error");
      }
    }

    function renderHistory(entries) {
      const body = document.getElementById("history-body");
      body.innerHTML = "";
      if (!entries.length) {
        body.innerHTML = `<tr><td colspan="7">No stock movements recorded.</td></tr>`;
        return;
      }
      for (const entry of entries) {
        const row = document.createElement("tr");
        for (const key of ["update_date", "stock_type", "stock_change", "current_stock_before", "current_stock_after", "description"]) {
          const cell = document.createElement("td");
          cell.textContent = formatValue(key, entry[key]);
          row.appendChild(cell);
        }
        const actions = document.createElement("td");
        actions.appendChild(actionButton("Delete", "danger", () => removeHistoryEntry(entry)));
        row.appendChild(actions);
        body.appendChild(row);
      }
    }

    async function removeHistoryEntry(entry) {
      if (!confirm("Delete this stock movement?")) return;
      try {
        await request(`${CONFIG.api}/history/${entry.id}`, { method: "DELETE" });
        setStatus("Stock movement deleted.", "success");
        load();
        if (state.historyItem) openHistory(state.historyItem);
      } catch (error) {
        setStatus(error.message, "error");
      }
    }

    function resetUsage(item) {
      if (!confirm(`Reset used stock for ${item.name}?`)) return;
      postJson(`${CONFIG.api}/${item.id}/reset`, {}, "Usage reset.");
    }

    function recordPayment(item) {
      const raw = prompt(`Payment for ${item.name} (outstanding ${Number(item.balance_amount).toFixed(2)})`);
      if (raw === null) return;
      const today = new Date().toISOString().slice(0, 10);
      postJson(`${CONFIG.api}/${item.id}/settlements`, { amount: Number(raw), payment_date: today }, "Payment recorded.");
    }

    async function recordSalary(item) {
      const raw = prompt(`Total paid to ${item.name} (salary ${Number(item.salary).toFixed(2)})`);
      if (raw === null) return;
      try {
        await request(`${CONFIG.api}/${encodeURIComponent(item.id)}/salary-payment`, {
          method: "PUT",
          headers: { "Content-Type": "application/json" },
          body: JSON.stringify({ total_paid: Number(raw) })
        });
        setStatus("Salary updated.", "success");
        load();
      } catch (error) {
        setStatus(error.message, "error");
      }
    }

    document.getElementById("filter-search").addEventListener("input", (event) => {
      state.filters.search = event.target.value.trim();
      state.page = 1;
      load();
    });
    document.getElementById("filter-status").addEventListener("change", (event) => {
      state.filters.status = event.target.value;
      state.page = 1;
      load();
    });
    document.getElementById("filter-month").addEventListener("change", (event) => {
      const [year, month] = (event.target.value || "").split("-");
      state.filters.year = year || "";
      state.filters.month = month ? String(Number(month)) : "";
      state.page = 1;
      load();
    });
    document.getElementById("prev-btn").addEventListener("click", () => { state.page -= 1; load(); });
    document.getElementById("next-btn").addEventListener("click", () => { state.page += 1; load(); });
    document.getElementById("refresh-btn").addEventListener("click", load);
    document.getElementById("add-btn").addEventListener("click", () => openDialog(null));
    document.getElementById("cancel-btn").addEventListener("click", () => document.getElementById("record-dialog").close());
    document.getElementById("record-form").addEventListener("submit", saveRecord);
    document.getElementById("history-close-btn").addEventListener("click", () => document.getElementById("history-dialog").close());

    const statusSelect = document.getElementById("filter-status");
    for (const option of CONFIG.statusOptions) {
      const element = document.createElement("option");
      element.value = option;
      element.textContent = option.replace(/_/g, " ");
      statusSelect.appendChild(element);
    }
    document.getElementById("add-btn").hidden = !CONFIG.canCreate || !CONFIG.form.length;
    renderHead();
    load();
  </script>
</body>
</html>
"""
).strip()


__all__ = ["SCREENS", "Screen", "get_screen", "render_index", "render_screen"]
