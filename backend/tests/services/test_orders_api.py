"""Orders API: the same endpoints over the three status column strategies.

Invariants:
    - Typed endpoints reject invalid statuses with 422 before the database is touched
    - /import writes raw strings: free_text stores them, the other two tables reject them
    - A rejected import stores nothing (whole batch rolled back)
    - Drift audit reports only what the schema let through
"""

import pytest
from uuid import uuid4

from app.config import get_settings

ALL_STRATEGIES = ["free_text", "check_constraint", "native_enum"]
DB_ENFORCED = ["check_constraint", "native_enum"]


async def _create(client, strategy, reference="ORD-1", status="pending"):
    return await client.post(
        f"/api/v1/orders/{strategy}",
        json={"reference": reference, "status": status},
    )


# ─── Typed CRUD ──────────────────────────────────────────────────

@pytest.mark.parametrize("strategy", ALL_STRATEGIES)
async def test_order_lifecycle(client, strategy):
    res = await _create(client, strategy, status="paid")
    assert res.status_code == 201
    order = res.json()
    assert order["status"] == "paid"

    res = await client.get(f"/api/v1/orders/{strategy}/{order['id']}")
    assert res.status_code == 200
    assert res.json()["reference"] == "ORD-1"

    res = await client.patch(
        f"/api/v1/orders/{strategy}/{order['id']}", json={"status": "shipped"},
    )
    assert res.status_code == 200
    assert res.json()["status"] == "shipped"

    res = await client.delete(f"/api/v1/orders/{strategy}/{order['id']}")
    assert res.status_code == 204

    res = await client.get(f"/api/v1/orders/{strategy}/{order['id']}")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


@pytest.mark.parametrize("strategy", ALL_STRATEGIES)
async def test_create_rejects_unknown_status_with_422(client, strategy):
    res = await _create(client, strategy, status="lost")
    assert res.status_code == 422
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    detail = error["details"][0]
    assert detail["field"] == "body.status"
    assert detail["type"] == "enum"
    assert "'pending'" in detail["expected"]


async def test_patch_rejects_unknown_status(client):
    order = (await _create(client, "check_constraint")).json()
    res = await client.patch(
        f"/api/v1/orders/check_constraint/{order['id']}", json={"status": "PAID"},
    )
    assert res.status_code == 422


async def test_unknown_strategy_fails_validation(client):
    res = await _create(client, "json_blob")
    assert res.status_code == 422
    assert res.json()["error"]["details"][0]["field"] == "path.strategy"


async def test_duplicate_reference_returns_409(client):
    await _create(client, "free_text")
    res = await _create(client, "free_text")
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "DUPLICATE_REFERENCE"


async def test_same_reference_allowed_in_different_tables(client):
    assert (await _create(client, "free_text")).status_code == 201
    assert (await _create(client, "native_enum")).status_code == 201


async def test_get_missing_order_returns_404(client):
    res = await client.get(f"/api/v1/orders/native_enum/{uuid4()}")
    assert res.status_code == 404


@pytest.mark.parametrize("strategy", ALL_STRATEGIES)
async def test_list_filters_by_status(client, strategy):
    await _create(client, strategy, reference="A", status="paid")
    await _create(client, strategy, reference="B", status="pending")
    await _create(client, strategy, reference="C", status="paid")

    res = await client.get(f"/api/v1/orders/{strategy}", params={"status": "paid"})
    assert res.status_code == 200
    body = res.json()
    assert {o["reference"] for o in body["orders"]} == {"A", "C"}
    assert body["pagination"] == {"limit": 50, "offset": 0}


async def test_list_rejects_unknown_status_filter(client):
    res = await client.get("/api/v1/orders/free_text", params={"status": "lost"})
    assert res.status_code == 422
    assert res.json()["error"]["details"][0]["field"] == "query.status"


# ─── Raw import ──────────────────────────────────────────────────

RAW_ROWS = [
    {"reference": "LEGACY-1", "status": "paid"},
    {"reference": "LEGACY-2", "status": "shiped"},
]


async def test_free_text_import_stores_invalid_values(client):
    res = await client.post("/api/v1/orders/free_text/import", json={"rows": RAW_ROWS})
    assert res.status_code == 201
    assert res.json() == {"strategy": "free_text", "imported": 2}

    res = await client.get("/api/v1/orders/free_text")
    statuses = {o["reference"]: o["status"] for o in res.json()["orders"]}
    assert statuses == {"LEGACY-1": "paid", "LEGACY-2": "shiped"}


@pytest.mark.parametrize("strategy", DB_ENFORCED)
async def test_database_rejects_invalid_import(client, strategy):
    res = await client.post(f"/api/v1/orders/{strategy}/import", json={"rows": RAW_ROWS})
    assert res.status_code == 422
    error = res.json()["error"]
    assert error["code"] == "ENUM_CONSTRAINT_VIOLATION"
    assert error["context"]["strategy"] == strategy

    res = await client.get(f"/api/v1/orders/{strategy}")
    assert res.json()["orders"] == []


@pytest.mark.parametrize("strategy", DB_ENFORCED)
async def test_database_accepts_valid_import(client, strategy):
    rows = [{"reference": "LEGACY-1", "status": "delivered"}]
    res = await client.post(f"/api/v1/orders/{strategy}/import", json={"rows": rows})
    assert res.status_code == 201
    assert res.json()["imported"] == 1


async def test_import_normalize_fixes_case_and_whitespace(client):
    rows = [{"reference": "LEGACY-1", "status": " Shipped "}]
    res = await client.post(
        "/api/v1/orders/check_constraint/import",
        params={"normalize": "true"}, json={"rows": rows},
    )
    assert res.status_code == 201

    res = await client.get("/api/v1/orders/check_constraint")
    assert res.json()["orders"][0]["status"] == "shipped"


async def test_import_rejects_duplicate_references_in_batch(client):
    rows = [
        {"reference": "DUP", "status": "paid"},
        {"reference": "DUP", "status": "paid"},
    ]
    res = await client.post("/api/v1/orders/free_text/import", json={"rows": rows})
    assert res.status_code == 409


# ─── Drift audit ─────────────────────────────────────────────────

async def test_drift_reports_free_text_garbage(client):
    await client.post("/api/v1/orders/free_text/import", json={"rows": RAW_ROWS})
    res = await client.get("/api/v1/orders/free_text/drift")
    assert res.status_code == 200
    report = res.json()
    assert report["strategy"] == "free_text"
    assert report["total_rows"] == 2
    assert report["invalid_rows"] == 1
    assert report["invalid_values"] == {"shiped": 1}
    assert report["is_clean"] is False


@pytest.mark.parametrize("strategy", DB_ENFORCED)
async def test_drift_is_clean_for_database_enforced_tables(client, strategy):
    await _create(client, strategy, status="cancelled")
    await client.post(f"/api/v1/orders/{strategy}/import", json={"rows": RAW_ROWS})

    report = (await client.get(f"/api/v1/orders/{strategy}/drift")).json()
    assert report["total_rows"] == 1
    assert report["is_clean"] is True


# ─── Validation status setting ───────────────────────────────────

@pytest.fixture
def validation_status_400(monkeypatch):
    monkeypatch.setenv("VALIDATION_ERROR_STATUS", "400")
    get_settings.cache_clear()
    yield
    monkeypatch.delenv("VALIDATION_ERROR_STATUS")
    get_settings.cache_clear()


async def test_validation_status_is_configurable(client, validation_status_400):
    res = await _create(client, "free_text", status="lost")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
