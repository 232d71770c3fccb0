"""
Wishlist: save, duplicate guard, move-to-cart through the Reservation Engine.
"""


class TestWishlistApi:

    def test_add_list_remove(self, client, auth_headers, make_product):
        product = make_product(name="Bookshelf")
        headers = auth_headers()

        response = client.post("/api/wishlist", json={"product_id": product.id}, headers=headers)
        assert response.status_code == 200
        item_id = response.json()["item_id"]

        items = client.get("/api/wishlist", headers=headers).json()["items"]
        assert [it["product"]["name"] for it in items] == ["Bookshelf"]

        assert client.delete(f"/api/wishlist/{item_id}", headers=headers).status_code == 200
        assert client.get("/api/wishlist", headers=headers).json()["items"] == []

    def test_duplicate_is_rejected(self, client, auth_headers, make_product):
        product = make_product()
        headers = auth_headers()
        client.post("/api/wishlist", json={"product_id": product.id}, headers=headers)

        response = client.post("/api/wishlist", json={"product_id": product.id}, headers=headers)

        assert response.status_code == 409
        assert response.json()["code"] == "duplicate"

    def test_unknown_product(self, client, auth_headers):
        response = client.post("/api/wishlist", json={"product_id": 4040}, headers=auth_headers())
        assert response.status_code == 404

    def test_other_users_item(self, client, auth_headers, make_product):
        product = make_product()
        item_id = client.post(
            "/api/wishlist", json={"product_id": product.id}, headers=auth_headers("alice"),
        ).json()["item_id"]

        assert client.delete(f"/api/wishlist/{item_id}", headers=auth_headers("bob")).status_code == 404
        assert client.post(
            f"/api/wishlist/{item_id}/move-to-cart", headers=auth_headers("bob"),
        ).status_code == 404


class TestMoveToCart:

    def test_reserves_one_unit_and_drops_entry(self, client, auth_headers, make_product, stock_of):
        product = make_product(stock=2)
        headers = auth_headers()
        item_id = client.post("/api/wishlist", json={"product_id": product.id}, headers=headers).json()["item_id"]

        response = client.post(f"/api/wishlist/{item_id}/move-to-cart", headers=headers)

        assert response.status_code == 200
        assert response.json()["new_quantity"] == 1
        assert stock_of(product.id) == 1
        assert client.get("/api/wishlist", headers=headers).json()["items"] == []
        assert client.get("/api/cart", headers=headers).json()["total_items"] == 1

    def test_out_of_stock_keeps_entry(self, client, auth_headers, make_product, stock_of):
        product = make_product(stock=0)
        headers = auth_headers()
        item_id = client.post("/api/wishlist", json={"product_id": product.id}, headers=headers).json()["item_id"]

        response = client.post(f"/api/wishlist/{item_id}/move-to-cart", headers=headers)

        assert response.status_code == 409
        assert response.json()["code"] == "insufficient_stock"
        assert stock_of(product.id) == 0
        assert len(client.get("/api/wishlist", headers=headers).json()["items"]) == 1
        assert client.get("/api/cart", headers=headers).json()["total_items"] == 0
