import pytest
from fastapi.testclient import TestClient

from petcatalog.adapters.catalog_store import InMemoryCatalogStore
from petcatalog.main import app, get_catalog_store

FLAVOR_SIZE = [
    {"name": "flavor", "display_name": "Flavor", "values": ["Chicken", "Beef"]},
    {"name": "size", "display_name": "Size", "values": ["Small", "Large"]},
]


@pytest.fixture
def client(seeded_store: InMemoryCatalogStore):
    app.dependency_overrides[get_catalog_store] = lambda: seeded_store
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client: TestClient) -> None:
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_parse_attributes(client: TestClient, product_page_html: str) -> None:
    response = client.post("/api/parse/attributes", json={"html": product_page_html})

    assert response.status_code == 200
    body = response.json()
    assert {"type": "ASIN", "value": "B0TESTASIN"} in body["identifiers"]
    assert body["product_details"]["brand_name"] == "Acme Pet"


def test_parse_attributes_empty_html_is_unprocessable(client: TestClient) -> None:
    response = client.post("/api/parse/attributes", json={"html": ""})
    assert response.status_code == 422


def test_parse_options_missing_twister(client: TestClient) -> None:
    response = client.post("/api/parse/options", json={"html": "<div>no selector</div>"})

    assert response.status_code == 422
    assert "twister-plus-inline-twister" in response.json()["detail"]


def test_parse_options(client: TestClient, twister_html: str) -> None:
    response = client.post("/api/parse/options", json={"html": twister_html})

    assert response.status_code == 200
    assert [d["display_name"] for d in response.json()["dimensions"]] == ["Flavor Name", "Size"]


def test_analyze_then_commit_twice(client: TestClient, seeded_store: InMemoryCatalogStore) -> None:
    analyzed = client.post("/api/options/analyze", json={"dimensions": FLAVOR_SIZE})
    assert analyzed.status_code == 200
    flavor, size = analyzed.json()["analyses"]
    assert flavor["new_values"] == ["Beef"]
    assert size["is_new_dimension"] is True

    first = client.post("/api/options/commit", json={"dimensions": FLAVOR_SIZE})
    writes = seeded_store.write_calls
    second = client.post("/api/options/commit", json={"dimensions": FLAVOR_SIZE})

    assert first.json()["summary"] == {"new_dimensions": 1, "new_values": 3, "reused_dimensions": 1}
    assert second.json()["message"] == "Saved: 2 existing options reused"
    assert seeded_store.write_calls == writes


def test_availability_parse_and_apply(client: TestClient, twister_html: str) -> None:
    parsed = client.post(
        "/api/availability/parse", json={"html": twister_html, "primary_dimension": "flavor"}
    )
    availability = parsed.json()["availability"]
    assert availability["size:Large"] is False

    applied = client.post("/api/availability/apply", json={
        "availability": availability,
        "dimensions": FLAVOR_SIZE,
        "group_name": "Chicken",
        "selected": ["Beef_Small"],
    })

    assert applied.status_code == 200
    assert applied.json()["selected"] == ["Chicken_Small", "Beef_Small"]


def test_generate_combinations_grouped(client: TestClient) -> None:
    response = client.post("/api/combinations/generate", json={"dimensions": FLAVOR_SIZE})

    body = response.json()
    assert [c["id"] for c in body["combinations"]] == ["Chicken_Small", "Chicken_Large", "Beef_Small", "Beef_Large"]
    assert body["groups"] == {"Chicken": ["Chicken_Small", "Chicken_Large"], "Beef": ["Beef_Small", "Beef_Large"]}


def test_parse_ingredients(client: TestClient) -> None:
    response = client.post("/api/ingredients/parse", json={"text": "Beef (30%), Rice"})

    ingredients = response.json()["ingredients"]
    assert ingredients[0] == {"name": "Beef (30%)", "position": 1, "percentage": 30.0, "is_primary": True}
    assert ingredients[1]["name"] == "Rice"
