"""
Catalog browsing: search, filters, sorting, paging, categories.
"""
import pytest

from common.exceptions import InvalidArgumentError, NotFoundError
from modules.catalog.service import catalog_service


@pytest.fixture
def shelf(make_category, make_product):
    furniture = make_category("Furniture")
    lighting = make_category("Lighting")
    make_category("Empty Aisle")
    products = {
        "desk": make_product(name="Standing Desk", price="450.00", category_id=furniture.id,
                             description="Height adjustable"),
        "chair": make_product(name="Office Chair", price="199.99", category_id=furniture.id),
        "lamp": make_product(name="Desk Lamp", price="35.00", category_id=lighting.id, stock=0),
        "bulb": make_product(name="LED Bulb", price="4.50", category_id=lighting.id,
                             description="Warm white, fits any desk lamp"),
    }
    return {"furniture": furniture, "lighting": lighting, **products}


class TestListProducts:

    def test_search_matches_name_and_description(self, db, shelf):
        products, total = catalog_service.list_products(db, search="desk")
        assert total == 3
        assert {p.name for p in products} == {"Standing Desk", "Desk Lamp", "LED Bulb"}

    def test_category_and_price_range(self, db, shelf):
        products, total = catalog_service.list_products(
            db, category_id=shelf["furniture"].id, min_price=200, max_price=500,
        )
        assert total == 1
        assert products[0].name == "Standing Desk"

    def test_sort_orders(self, db, shelf):
        def names(sort):
            return [p.name for p in catalog_service.list_products(db, sort=sort)[0]]

        assert names("name") == ["Desk Lamp", "LED Bulb", "Office Chair", "Standing Desk"]
        assert names("price_asc") == ["LED Bulb", "Desk Lamp", "Office Chair", "Standing Desk"]
        assert names("price_desc") == ["Standing Desk", "Office Chair", "Desk Lamp", "LED Bulb"]
        assert names("newest")[0] == "LED Bulb"

    def test_paging(self, db, shelf):
        products, total = catalog_service.list_products(db, sort="price_asc", page=2, per_page=3)
        assert total == 4
        assert [p.name for p in products] == ["Standing Desk"]
        assert catalog_service.total_pages(total, 3) == 2
        assert catalog_service.total_pages(0, 3) == 1

    def test_rejects_bad_arguments(self, db):
        with pytest.raises(InvalidArgumentError):
            catalog_service.list_products(db, sort="random")
        with pytest.raises(InvalidArgumentError):
            catalog_service.list_products(db, min_price=10, max_price=5)


class TestCategories:

    def test_counts_include_empty_categories(self, db, shelf):
        counts = {c["name"]: c["product_count"] for c in catalog_service.list_categories_with_counts(db)}
        assert counts == {"Empty Aisle": 0, "Furniture": 2, "Lighting": 2}


class TestCatalogApi:

    def test_list_endpoint(self, client, shelf):
        response = client.get("/api/products", params={"q": "lamp", "sort": "price_asc"})
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["total_pages"] == 1
        assert [p["name"] for p in data["products"]] == ["LED Bulb", "Desk Lamp"]
        assert data["products"][1]["in_stock"] is False
        assert data["products"][1]["price"] == "35.00"

    def test_invalid_price_range(self, client, shelf):
        response = client.get("/api/products", params={"min_price": 100, "max_price": 10})
        assert response.status_code == 422
        assert response.json()["code"] == "invalid_argument"

    def test_detail_and_missing(self, client, shelf):
        response = client.get(f"/api/products/{shelf['chair'].id}")
        assert response.status_code == 200
        assert response.json()["sku"] == shelf["chair"].sku

        response = client.get("/api/products/99999")
        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    def test_best_sellers_and_categories(self, client, shelf):
        assert len(client.get("/api/products/best-sellers").json()["products"]) == 4
        categories = client.get("/api/categories").json()["categories"]
        assert [c["name"] for c in categories] == ["Empty Aisle", "Furniture", "Lighting"]

    def test_missing_product_service_error(self, db):
        with pytest.raises(NotFoundError):
            catalog_service.get_product(db, 5)
