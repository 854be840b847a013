import pytest
from fastapi.testclient import TestClient

from main import app
from verimed.application.search_use_case import SearchProductsUseCase
from verimed.application.verify_use_case import VerifyProductUseCase
from verimed.container import get_search_uc, get_verify_uc
from verimed.infra.cache.memory_cache import MemoryCache
from verimed.infra.registry.memory_registry import InMemoryRegistry
from verimed.presentation import security
from verimed.services.registry_service import RegistryService


@pytest.fixture
def cli():
    svc = RegistryService(InMemoryRegistry(latency_ms=0), MemoryCache())
    app.dependency_overrides[get_verify_uc] = lambda: VerifyProductUseCase(svc)
    app.dependency_overrides[get_search_uc] = lambda: SearchProductsUseCase(svc)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_verify_registered(cli):
    res = cli.post("/v1/verify", json={"name": "paracetamol"})
    assert res.status_code == 200
    product = res.json()["product"]
    assert product["verification"]["status"] == "registered"
    assert "Paracetamol" in product["verification"]["title"]
    assert len(product["id"]) == 16


def test_verify_not_found(cli):
    res = cli.post("/v1/verify", json={"reg_no": "99-9999"})
    assert res.status_code == 200
    product = res.json()["product"]
    assert product["verification"]["status"] == "not_found"
    assert any(a.get("link") for a in product["alerts"])


def test_verify_requires_a_field(cli):
    res = cli.post("/v1/verify", json={})
    assert res.status_code == 400
    assert res.json()["error"] == "Bad Request"


def test_verify_batch(cli):
    res = cli.post("/v1/verify/batch", json={"requests": [{"barcode": "12345678"}, {}]})
    assert res.status_code == 200
    results = res.json()["results"]
    assert results[0]["product"]["input_type"] == "barcode"
    assert results[1]["product"] is None and results[1]["error"]

    res = cli.post("/v1/verify/batch", json={"requests": [{"name": "x"}] * 11})
    assert res.status_code == 400


def test_search_and_suggestions(cli):
    res = cli.get("/v1/search", params={"q": "paracetamol"})
    assert res.status_code == 200
    items = res.json()
    assert items[0]["reg_no"] == "04-1234"
    assert items[0]["id"].startswith("search_")

    assert cli.get("/v1/search", params={"q": "   "}).status_code == 400
    assert cli.get("/v1/search", params={"q": "a" * 101}).status_code == 400

    sugg = cli.get("/v1/search/suggestions", params={"q": "amox"}).json()
    assert [s["text"] for s in sugg] == ["Amoxicillin"]
    assert cli.get("/v1/search/suggestions", params={"q": "a"}).json() == []


def test_api_key_guard(cli, monkeypatch):
    monkeypatch.setattr(security, "REQUIRE_API_KEY", True)
    monkeypatch.setattr(security, "SERVICE_API_KEYS", security._parse_keys("old-key, new-key"))
    assert cli.post("/v1/verify", json={"name": "paracetamol"}).status_code == 401
    res = cli.post("/v1/verify", json={"name": "paracetamol"}, headers={"X-Api-Key": "wrong"})
    assert res.status_code == 401
    # dua key aktif selama rotasi
    for key in ("old-key", "new-key"):
        res = cli.post("/v1/verify", json={"name": "paracetamol"}, headers={"X-Api-Key": key})
        assert res.status_code == 200


def test_api_key_guard_without_configured_keys(cli, monkeypatch):
    monkeypatch.setattr(security, "REQUIRE_API_KEY", True)
    monkeypatch.setattr(security, "SERVICE_API_KEYS", frozenset())
    res = cli.get("/v1/search", params={"q": "paracetamol"}, headers={"X-Api-Key": "anything"})
    assert res.status_code == 503
    assert "no API keys configured" in res.json()["detail"]


def test_health_endpoints():
    cli = TestClient(app)
    assert cli.get("/healthz").json() == {"ok": True}
    body = cli.get("/health").json()
    assert body["status"] == "healthy"
    assert body["services"]["registry"]["status"] == "healthy"
    assert cli.get("/readyz").json()["ok"] is True


def test_verify_fields_are_snake_case(cli):
    res = cli.post("/v1/verify", json={"regNo": "04-1234"})
    assert res.status_code == 400
    assert "reg_no" in res.json()["message"]

    product = cli.post("/v1/verify", json={"reg_no": "04-1234"}).json()["product"]
    assert product["verification"]["reg_no"] == "04-1234"
    assert product["input_type"] == "manual"
