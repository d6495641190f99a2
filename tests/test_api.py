import pytest


async def _create_product(client, name="Espresso", price=2.5, category="Coffee"):
    response = await client.post(
        "/api/products",
        json={"name": name, "price": price, "category": category, "description": f"Fresh {name}"},
    )
    assert response.status_code == 201, response.text
    return response.json()


async def _create_order(client, customer="Alice", items=()):
    response = await client.post(
        "/api/orders", json={"customerName": customer, "orderItems": list(items)}
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestInfrastructure:

    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert "timestamp" in body
        assert body["environment"]

    async def test_request_id_is_echoed(self, client):
        response = await client.get("/health", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"

    async def test_metrics_exposition(self, client):
        await client.get("/health")
        response = await client.get("/metrics")
        assert response.status_code == 200
        assert "cafe_http_requests_total" in response.text

    async def test_unknown_api_route_is_json_404(self, client):
        response = await client.get("/api/nope")
        assert response.status_code == 404
        assert response.json()["error"] == "Not Found"

    async def test_index_page(self, client):
        response = await client.get("/")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]


class TestProductsApi:

    async def test_create_and_get_product_camel_case(self, client):
        created = await _create_product(client)
        assert created["price"] == 2.5
        assert created["isActive"] is True
        assert "createdAt" in created

        response = await client.get(f"/api/products/{created['id']}")
        assert response.status_code == 200
        assert response.json()["name"] == "Espresso"

    async def test_invalid_id_is_400(self, client):
        response = await client.get("/api/products/abc")
        assert response.status_code == 400
        assert response.json()["error"] == "Validation error"

    async def test_unknown_product_is_404(self, client):
        response = await client.get("/api/products/999")
        assert response.status_code == 404
        assert response.json() == {"error": "Product not found"}

    @pytest.mark.parametrize(
        "payload",
        [
            {"name": "Tea", "price": 0, "category": "Tea", "description": "Pot"},
            {"name": "", "price": 2, "category": "Tea", "description": "Pot"},
            {"price": 2, "category": "Tea", "description": "Pot"},
            {"name": "Tea", "price": 2, "category": "Tea"},
            {"name": "Tea", "price": 2, "category": "Tea", "description": ""},
            {"name": "Tea", "price": 2, "category": "Tea", "description": "   "},
        ],
    )
    async def test_create_invalid_product_is_400(self, client, payload):
        response = await client.post("/api/products", json=payload)
        assert response.status_code == 400

    @pytest.mark.parametrize("path", ["/api/products/9223372036854775808", "/api/products/0"])
    async def test_out_of_range_id_is_400(self, client, path):
        response = await client.get(path)
        assert response.status_code == 400
        assert response.json()["error"] == "Validation error"

    async def test_update_cannot_blank_description(self, client):
        created = await _create_product(client)
        response = await client.put(f"/api/products/{created['id']}", json={"description": ""})
        assert response.status_code == 400
        body = (await client.get(f"/api/products/{created['id']}")).json()
        assert body["description"] == "Fresh Espresso"

    async def test_partial_update(self, client):
        created = await _create_product(client)
        response = await client.put(f"/api/products/{created['id']}", json={"price": 2.8})
        assert response.status_code == 200
        body = response.json()
        assert body["price"] == 2.8
        assert body["name"] == "Espresso"

    async def test_list_hides_deactivated(self, client):
        espresso = await _create_product(client)
        await _create_product(client, name="Croissant", price=3.25, category="Pastry")

        response = await client.post(f"/api/products/{espresso['id']}/deactivate")
        assert response.status_code == 200
        assert response.json()["isActive"] is False

        names = [p["name"] for p in (await client.get("/api/products")).json()]
        assert names == ["Croissant"]

    async def test_delete_referenced_product_is_409(self, client):
        espresso = await _create_product(client)
        await _create_order(client, items=[{"productId": espresso["id"], "quantity": 1, "price": 2.5}])

        response = await client.delete(f"/api/products/{espresso['id']}")
        assert response.status_code == 409
        assert "error" in response.json()

        assert (await client.get(f"/api/products/{espresso['id']}")).status_code == 200

    async def test_delete_unreferenced_product(self, client):
        espresso = await _create_product(client)
        response = await client.delete(f"/api/products/{espresso['id']}")
        assert response.status_code == 200
        assert response.json() == {"message": "Product deleted successfully"}
        assert (await client.get(f"/api/products/{espresso['id']}")).status_code == 404


class TestOrdersApi:

    async def test_order_lifecycle(self, client):
        espresso = await _create_product(client)
        croissant = await _create_product(client, name="Croissant", price=3.25, category="Pastry")

        order = await _create_order(
            client, items=[{"productId": espresso["id"], "quantity": 2, "price": 2.5}]
        )
        assert order["totalAmount"] == 5.0
        assert order["isPaid"] is False
        espresso_item = order["orderItems"][0]
        assert espresso_item["product"]["name"] == "Espresso"

        response = await client.post(
            f"/api/orders/{order['id']}/items",
            json={"productId": croissant["id"], "quantity": 1, "price": 3.25},
        )
        assert response.status_code == 201
        assert (await client.get(f"/api/orders/{order['id']}")).json()["totalAmount"] == 8.25

        response = await client.put(
            f"/api/orders/{order['id']}/items/{espresso_item['id']}",
            json={"productId": espresso["id"], "quantity": 1, "price": 2.5},
        )
        assert response.status_code == 200
        assert response.json()["quantity"] == 1
        assert (await client.get(f"/api/orders/{order['id']}")).json()["totalAmount"] == 5.75

        response = await client.delete(f"/api/orders/{order['id']}/items/{espresso_item['id']}")
        assert response.status_code == 200
        assert (await client.get(f"/api/orders/{order['id']}")).json()["totalAmount"] == 3.25

        response = await client.put(f"/api/orders/{order['id']}", json={"isPaid": True})
        assert response.status_code == 200
        assert response.json()["isPaid"] is True
        assert response.json()["totalAmount"] == 3.25

        response = await client.delete(f"/api/orders/{order['id']}")
        assert response.status_code == 200
        assert (await client.get(f"/api/orders/{order['id']}")).status_code == 404

    async def test_create_order_requires_items(self, client):
        response = await client.post("/api/orders", json={"customerName": "Alice", "orderItems": []})
        assert response.status_code == 400

    async def test_create_order_with_unknown_product(self, client):
        response = await client.post(
            "/api/orders",
            json={"customerName": "Alice", "orderItems": [{"productId": 77, "quantity": 1, "price": 1}]},
        )
        assert response.status_code == 400
        assert response.json()["details"] == {"productIds": [77]}

    async def test_put_replaces_items(self, client):
        espresso = await _create_product(client)
        latte = await _create_product(client, name="Latte", price=4, category="Coffee")
        order = await _create_order(
            client, items=[{"productId": espresso["id"], "quantity": 2, "price": 2.5}]
        )

        response = await client.put(
            f"/api/orders/{order['id']}",
            json={"orderItems": [{"productId": latte["id"], "quantity": 3, "price": 4}]},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["totalAmount"] == 12.0
        assert [item["productId"] for item in body["orderItems"]] == [latte["id"]]

    async def test_item_of_another_order_is_404(self, client):
        espresso = await _create_product(client)
        items = [{"productId": espresso["id"], "quantity": 1, "price": 2.5}]
        first = await _create_order(client, items=items)
        second = await _create_order(client, customer="Bob", items=items)

        foreign_item_id = second["orderItems"][0]["id"]
        response = await client.delete(f"/api/orders/{first['id']}/items/{foreign_item_id}")
        assert response.status_code == 404

    async def test_out_of_range_ids_are_400(self, client):
        huge = 2**63
        espresso = await _create_product(client)
        order = await _create_order(
            client, items=[{"productId": espresso["id"], "quantity": 1, "price": 2.5}]
        )

        assert (await client.get(f"/api/orders/{huge}")).status_code == 400
        assert (await client.delete(f"/api/orders/{order['id']}/items/{huge}")).status_code == 400

        response = await client.post(
            "/api/orders",
            json={"customerName": "Alice", "orderItems": [{"productId": huge, "quantity": 1, "price": 1}]},
        )
        assert response.status_code == 400

        response = await client.post(
            f"/api/orders/{order['id']}/items",
            json={"productId": espresso["id"], "quantity": huge, "price": 2.5},
        )
        assert response.status_code == 400

        body = (await client.get(f"/api/orders/{order['id']}")).json()
        assert body["totalAmount"] == 2.5

    async def test_unknown_order_is_404(self, client):
        assert (await client.get("/api/orders/999")).status_code == 404
        assert (await client.delete("/api/orders/999")).status_code == 404


class TestDashboardApi:

    async def test_stats(self, client):
        espresso = await _create_product(client)
        await _create_order(client, items=[{"productId": espresso["id"], "quantity": 2, "price": 2.5}])

        response = await client.get("/api/dashboard/stats")
        assert response.status_code == 200
        body = response.json()
        assert body["totalOrders"] == 1
        assert body["todayOrders"] == 1
        assert body["totalRevenue"] == 5.0
        assert body["activeProducts"] == 1
        assert len(body["recentOrders"]) == 1
        assert body["topProducts"][0]["totalQuantity"] == 2
        assert body["dailyRevenue"][0]["revenue"] == 5.0

    async def test_revenue_defaults_to_seven_days(self, client):
        response = await client.get("/api/dashboard/revenue", params={"period": "bogus"})
        assert response.status_code == 200
        body = response.json()
        assert body["period"] == "7d"
        assert body["revenue"] == 0
        assert body["orderCount"] == 0
        assert body["averageOrderValue"] == 0
