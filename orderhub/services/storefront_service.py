"""
WooCommerce 服务层 - REST API wc/v3
参考: https://woocommerce.github.io/woocommerce-rest-api-docs/#list-all-orders
认证: consumer_key / consumer_secret 以查询参数传递（queryStringAuth）
"""
import httpx
from loguru import logger
from typing import Optional, Any

from orderhub.core.config import get_settings

VALID_STATUSES = [
    "pending",
    "processing",
    "on-hold",
    "completed",
    "cancelled",
    "refunded",
    "failed",
    "checkout-draft",
    "trash",
    "auto-draft",
]

# metadata 输出字段 -> WooCommerce meta_data key
METADATA_KEYS: dict[str, str] = {
    "order_fecha_inicio": "order_fecha_inicio",
    "order_fecha_termino": "order_fecha_termino",
    "num_jornadas": "num_jornadas",
    "calculated_subtotal": "calculated_subtotal",
    "calculated_discount": "calculated_discount",
    "calculated_iva": "calculated_iva",
    "calculated_total": "calculated_total",
    "company_rut": "company_rut",
    "order_proyecto": "order_proyecto",
    "pdf_on_hold_url": "_pdf_on_hold_url",
    "pdf_processing_url": "_pdf_processing_url",
}


class OrderNotFoundError(LookupError):
    """WooCommerce 中不存在该订单"""


class StorefrontService:
    """WooCommerce 订单服务"""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = get_settings()
        self.api_url = self.settings.storefront_api_url
        self.transport = transport
        if not self.settings.has_storefront_credentials():
            raise ValueError(
                "请在 .env 中配置 WOOCOMMERCE_CONSUMER_KEY + WOOCOMMERCE_CONSUMER_SECRET"
            )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.settings.UPSTREAM_TIMEOUT_SECONDS,
            transport=self.transport,
        )

    async def _get(self, path: str, params: Optional[dict] = None) -> httpx.Response:
        """
        发起 WooCommerce GET 请求
        GET {store}/wp-json/wc/v3/{path}?consumer_key=..&consumer_secret=..
        """
        query: dict[str, Any] = {
            "consumer_key": self.settings.WOOCOMMERCE_CONSUMER_KEY,
            "consumer_secret": self.settings.WOOCOMMERCE_CONSUMER_SECRET,
        }
        if params:
            query.update(params)
        url = f"{self.api_url}/{path}"

        logger.info(f"请求 WooCommerce: GET {url}")
        logger.debug(f"params: {params}")

        async with self._client() as client:
            try:
                response = await client.get(url, params=query)
                response.raise_for_status()
                return response
            except httpx.HTTPStatusError as e:
                logger.error(
                    f"WooCommerce 请求失败: {e.response.status_code} - {e.response.text}"
                )
                raise

    @staticmethod
    def _meta_value(meta_data: list[dict], key: str) -> Any:
        for meta in meta_data:
            if meta.get("key") == key:
                return meta.get("value") or ""
        return ""

    def transform_order(self, order: dict) -> dict[str, Any]:
        """WooCommerce 原始订单 -> 管理后台使用的精简结构"""
        billing = order.get("billing") or {}
        meta_data = order.get("meta_data") or []
        return {
            "id": order.get("id"),
            "status": order.get("status"),
            "date_created": order.get("date_created"),
            "date_modified": order.get("date_modified"),
            "customer_id": order.get("customer_id"),
            "billing": {
                "first_name": billing.get("first_name"),
                "last_name": billing.get("last_name"),
                "company": billing.get("company"),
                "address_1": billing.get("address_1"),
                "city": billing.get("city"),
                "email": billing.get("email"),
                "phone": billing.get("phone"),
            },
            "metadata": {
                name: self._meta_value(meta_data, key)
                for name, key in METADATA_KEYS.items()
            },
            "line_items": [
                {
                    "name": item.get("name"),
                    "product_id": item.get("product_id"),
                    "sku": item.get("sku"),
                    "price": item.get("price"),
                    "quantity": item.get("quantity"),
                    "image": (item.get("image") or {}).get("src") or "",
                }
                for item in order.get("line_items") or []
            ],
        }

    async def get_orders(
        self,
        page: str = "1",
        per_page: str = "10",
        status: str = "",
        customer: str = "",
    ) -> dict[str, Any]:
        """
        获取订单列表
        返回 {"orders": [...], "total": x-wp-total, "totalPages": x-wp-totalpages}
        """
        params: dict[str, Any] = {"page": page, "per_page": per_page}
        if status and status in VALID_STATUSES:
            params["status"] = status
        if customer:
            params["customer"] = customer

        response = await self._get("orders", params)
        orders = [self.transform_order(o) for o in response.json()]
        logger.info(f"成功获取 {len(orders)} 条 WooCommerce 订单")
        return {
            "orders": orders,
            "total": response.headers.get("x-wp-total"),
            "totalPages": response.headers.get("x-wp-totalpages"),
        }

    async def get_order(self, order_id: int) -> dict[str, Any]:
        """获取单个原始订单（含 meta_data、shipping_lines）"""
        try:
            response = await self._get(f"orders/{order_id}")
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise OrderNotFoundError(f"Order {order_id} not found") from e
            raise
        return response.json()
