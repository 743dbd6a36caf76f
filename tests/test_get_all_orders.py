"""
/api/get-all-orders 合并订单接口
"""
import httpx

from conftest import FakeStore, RoutingTransport, woo_raw_order, wp_order


class FakeOrigin:
    """本服务 /api/woo/get-orders 与 /api/wp/get-orders 的假实现"""

    def __init__(self, woo_payload=None, wp_payload=None, woo_status=200):
        self.woo_payload = woo_payload if woo_payload is not None else {"data": {"orders": []}}
        self.wp_payload = wp_payload if wp_payload is not None else {"orders": {"orders": []}}
        self.woo_status = woo_status
        self.paths: list[str] = []
        self.params: list[dict] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.paths.append(request.url.path)
        self.params.append(dict(request.url.params))
        if request.url.path == "/api/woo/get-orders":
            return httpx.Response(self.woo_status, json=self.woo_payload)
        if request.url.path == "/api/wp/get-orders":
            return httpx.Response(200, json=self.wp_payload)
        return httpx.Response(404)


def test_storefront_only_result(client, use_transport):
    order = {"id": 1, "status": "completed", "billing": {"first_name": "Ana"}}
    origin = FakeOrigin(woo_payload={"data": {"orders": [order]}})
    use_transport(httpx.MockTransport(origin.handler))

    response = client.get("/api/get-all-orders")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Orders fetched successfully"
    assert body["data"]["orders"] == [{**order, "source": "storefront", "secondary_data": None}]
    assert body["data"]["total"] == 1
    assert body["data"]["totalPages"] == 1
    assert body["data"]["page"] == 1
    assert body["data"]["per_page"] == 20
    assert body["data"]["debug"] == {"wooOrdersCount": 1, "wpOrdersCount": 0, "uniqueOrdersCount": 1}


def test_content_only_result(client, use_transport):
    record = {"id": 7, "status": "processing", "fotos_garantia": None}
    origin = FakeOrigin(wp_payload={"orders": {"orders": [record]}})
    use_transport(httpx.MockTransport(origin.handler))

    body = client.get("/api/get-all-orders").json()

    [order] = body["data"]["orders"]
    assert order["id"] == 7
    assert order["status"] == "processing"
    assert order["primary_data"] is None
    assert order["secondary_data"]["fotos_garantia"] == []
    assert order["secondary_data"]["correo_enviado"] is False
    assert order["secondary_data"]["pago_completo"] is False


def test_shared_id_is_merged(client, use_transport):
    origin = FakeOrigin(
        woo_payload={"data": {"orders": [{"id": 3, "status": "completed"}]}},
        wp_payload={"orders": {"orders": [{"id": 3, "status": "completed", "pago_completo": True}]}},
    )
    use_transport(httpx.MockTransport(origin.handler))

    data = client.get("/api/get-all-orders").json()["data"]

    assert data["total"] == 1
    [order] = data["orders"]
    assert order["source"] == "both"
    assert order["secondary_data"]["pago_completo"] is True
    assert order["secondary_data"]["fotos_garantia"] == []
    assert data["debug"] == {"wooOrdersCount": 1, "wpOrdersCount": 1, "uniqueOrdersCount": 1}


def test_pagination_params_forwarded_and_not_sliced(client, use_transport):
    woo_orders = [{"id": i, "status": "completed"} for i in range(1, 6)]
    origin = FakeOrigin(woo_payload={"data": {"orders": woo_orders}})
    use_transport(httpx.MockTransport(origin.handler))

    data = client.get("/api/get-all-orders", params={"page": "2", "per_page": "2"}).json()["data"]

    assert origin.paths == ["/api/woo/get-orders", "/api/wp/get-orders"]
    assert origin.params == [{"page": "2", "per_page": "2"}] * 2
    assert len(data["orders"]) == 5
    assert data["total"] == 5
    assert data["totalPages"] == 3
    assert data["page"] == 2
    assert data["per_page"] == 2


def test_non_numeric_per_page_falls_back(client, use_transport):
    origin = FakeOrigin()
    use_transport(httpx.MockTransport(origin.handler))

    data = client.get("/api/get-all-orders", params={"per_page": "many"}).json()["data"]

    assert data["per_page"] == 20
    assert data["totalPages"] == 0


def test_malformed_upstream_degrades_to_empty(client, use_transport):
    origin = FakeOrigin(
        woo_payload={"success": False, "message": "unexpected"},
        wp_payload={"error": "Failed to fetch orders"},
    )
    use_transport(httpx.MockTransport(origin.handler))

    response = client.get("/api/get-all-orders")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["orders"] == []
    assert data["debug"] == {"wooOrdersCount": 0, "wpOrdersCount": 0, "uniqueOrdersCount": 0}


def test_storefront_failure_returns_error_envelope(client, use_transport):
    origin = FakeOrigin(woo_status=500, woo_payload={"success": False})
    use_transport(httpx.MockTransport(origin.handler))

    response = client.get("/api/get-all-orders")

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Error fetching combined orders"
    assert "500" in body["error"]
    assert body["details"]["name"] == "HTTPStatusError"
    assert "stack" in body
    assert origin.paths == ["/api/woo/get-orders"]


def test_unreachable_upstream_returns_error_envelope(client, use_transport):
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    use_transport(httpx.MockTransport(refuse))

    response = client.get("/api/get-all-orders")

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["details"]["name"] == "ConnectError"


def test_zero_per_page_is_reported_as_failure(client, use_transport):
    origin = FakeOrigin()
    use_transport(httpx.MockTransport(origin.handler))

    response = client.get("/api/get-all-orders", params={"per_page": "0"})

    assert response.status_code == 500
    assert response.json()["details"]["name"] == "ValueError"


def test_end_to_end_through_source_routes(client, use_transport):
    store = FakeStore(
        woo_orders=[woo_raw_order(100), woo_raw_order(101, status="on-hold")],
        wp_orders=[wp_order(101, fotos_garantia=None), wp_order(205)],
    )
    use_transport(RoutingTransport(store))

    response = client.get("/api/get-all-orders", params={"per_page": "10"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert [o["id"] for o in data["orders"]] == [100, 101, 205]
    assert [o["source"] for o in data["orders"]] == ["storefront", "both", "content"]
    both = data["orders"][1]
    assert both["metadata"]["calculated_total"] == "119000"
    assert both["secondary_data"]["fotos_garantia"] == []
    assert data["debug"] == {"wooOrdersCount": 2, "wpOrdersCount": 2, "uniqueOrdersCount": 3}
    assert data["totalPages"] == 1


def test_order_stats_route(client, use_transport):
    origin = FakeOrigin(
        woo_payload={"data": {"orders": [
            {"id": 1, "status": "completed", "metadata": {"calculated_total": "1000"}},
            {"id": 2, "status": "processing", "metadata": {"calculated_total": "500"}},
        ]}},
        wp_payload={"orders": {"orders": [{"id": 9, "status": "pending", "total": "300"}]}},
    )
    use_transport(httpx.MockTransport(origin.handler))

    response = client.get("/api/orders/stats")

    assert response.status_code == 200
    stats = response.json()["data"]
    assert stats["totalOrders"] == 3
    assert stats["statusCounts"] == {"completed": 1, "processing": 1, "pending": 1}
    assert stats["totalRevenue"] == "1000.00"
    assert stats["processingOrders"] == 1


def test_order_stats_route_failure(client, use_transport):
    origin = FakeOrigin(woo_status=502)
    use_transport(httpx.MockTransport(origin.handler))

    response = client.get("/api/orders/stats")

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Error al obtener estadísticas de órdenes"}
