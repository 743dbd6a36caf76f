"""
测试公共配置：环境变量、上游 HTTP 假实现、TestClient。
"""
import os

os.environ.setdefault("WOOCOMMERCE_STORE_URL", "https://store.test")
os.environ.setdefault("WOOCOMMERCE_CONSUMER_KEY", "ck_test")
os.environ.setdefault("WOOCOMMERCE_CONSUMER_SECRET", "cs_test")
os.environ.setdefault("WORDPRESS_USERNAME", "admin")
os.environ.setdefault("WORDPRESS_PASSWORD", "secret")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

import httpx
import pytest
from fastapi.testclient import TestClient

from orderhub.api.dependencies import get_upstream_transport
from orderhub.core.config import get_settings
from orderhub.main import app

STORE_ORDERS_PATH = "/wp-json/wc/v3/orders"
CONTENT_ORDERS_PATH = "/wp-json/custom/v1/orders"


def woo_raw_order(order_id: int, status: str = "completed", **overrides) -> dict:
    """WooCommerce REST 原始订单"""
    order = {
        "id": order_id,
        "status": status,
        "date_created": "2025-03-10T12:00:00",
        "date_modified": "2025-03-11T09:30:00",
        "customer_id": 42,
        "billing": {
            "first_name": "Ana",
            "last_name": "Pérez",
            "company": "Producciones Sur",
            "address_1": "Av. Italia 1234",
            "city": "Santiago",
            "email": "ana@example.cl",
            "phone": "+56 9 1234 5678",
            "postcode": "7500000",
        },
        "meta_data": [
            {"id": 1, "key": "order_fecha_inicio", "value": "2025-03-15"},
            {"id": 2, "key": "order_fecha_termino", "value": "2025-03-17"},
            {"id": 3, "key": "num_jornadas", "value": "3"},
            {"id": 4, "key": "calculated_total", "value": "119000"},
            {"id": 5, "key": "order_proyecto", "value": "Rodaje Valparaíso"},
            {"id": 6, "key": "_pdf_on_hold_url", "value": "https://cdn.test/on-hold.pdf"},
        ],
        "line_items": [
            {
                "id": 10,
                "name": "Cámara RED Komodo",
                "product_id": 501,
                "sku": "RED-KOMODO",
                "price": 100000,
                "quantity": 1,
                "image": {"id": 9, "src": "https://cdn.test/komodo.jpg"},
            }
        ],
        "shipping_lines": [],
        "coupon_lines": [],
    }
    order.update(overrides)
    return order


def wp_order(order_id: int, status: str = "processing", **overrides) -> dict:
    """WordPress 自定义接口订单"""
    order = {
        "id": order_id,
        "status": status,
        "date_created": "2025-03-10 12:00:00",
        "total": "119000",
        "customer": {"first_name": "Ana", "last_name": "Pérez", "email": "ana@example.cl"},
        "fotos_garantia": ["https://cdn.test/garantia-1.jpg"],
        "correo_enviado": True,
        "pago_completo": False,
    }
    order.update(overrides)
    return order


class FakeStore:
    """WooCommerce + WordPress 上游的假实现，记录收到的请求"""

    def __init__(self, woo_orders=None, wp_orders=None):
        self.woo_orders = woo_orders if woo_orders is not None else []
        self.wp_orders = wp_orders if wp_orders is not None else []
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == STORE_ORDERS_PATH:
            return httpx.Response(
                200,
                json=self.woo_orders,
                headers={"x-wp-total": str(len(self.woo_orders)), "x-wp-totalpages": "1"},
            )
        if path.startswith(STORE_ORDERS_PATH + "/"):
            order_id = int(path.rsplit("/", 1)[1])
            for order in self.woo_orders:
                if order["id"] == order_id:
                    return httpx.Response(200, json=order)
            return httpx.Response(404, json={"code": "woocommerce_rest_shop_order_invalid_id"})
        if path == CONTENT_ORDERS_PATH:
            return httpx.Response(
                200,
                json={"orders": self.wp_orders},
                headers={"X-WP-Total": str(len(self.wp_orders)), "X-WP-TotalPages": "1"},
            )
        return httpx.Response(404, json={"message": "not found"})


class RoutingTransport(httpx.AsyncBaseTransport):
    """发往 testserver 的请求交给应用本身，其余交给 FakeStore"""

    def __init__(self, store: FakeStore):
        self.local = httpx.ASGITransport(app=app)
        self.remote = httpx.MockTransport(store.handler)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == "testserver":
            return await self.local.handle_async_request(request)
        return await self.remote.handle_async_request(request)


@pytest.fixture
def use_transport():
    """将上游传输层替换为给定 transport"""
    def _use(transport: httpx.AsyncBaseTransport):
        app.dependency_overrides[get_upstream_transport] = lambda: transport
        return transport

    yield _use
    app.dependency_overrides.pop(get_upstream_transport, None)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def without_credentials(monkeypatch):
    """去掉上游认证配置"""
    for name in (
        "WOOCOMMERCE_CONSUMER_KEY",
        "WOOCOMMERCE_CONSUMER_SECRET",
        "WORDPRESS_USERNAME",
        "WORDPRESS_PASSWORD",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    monkeypatch.undo()
    get_settings.cache_clear()
