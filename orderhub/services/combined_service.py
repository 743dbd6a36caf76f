"""
合并订单服务：从本服务的 /api/woo/get-orders 与 /api/wp/get-orders 取同一页，按 ID 合并。
两次请求顺序执行，之间没有原子性保证（两边数据可能来自不同时刻）。
"""
import httpx
from loguru import logger
from typing import Optional

from orderhub.core.config import get_settings
from orderhub.order_utils import (
    content_orders_from_payload,
    merge_orders,
    storefront_orders_from_payload,
    total_pages,
)
from orderhub.schemas.orders import CombinedOrdersDebug, CombinedOrdersPage


class CombinedOrdersService:
    """合并两个来源的订单"""

    def __init__(self, origin: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = get_settings()
        self.origin = origin.rstrip("/")
        self.transport = transport

    async def _fetch_json(self, client: httpx.AsyncClient, path: str, page: int, per_page: int):
        url = f"{self.origin}{path}"
        logger.info(f"请求上游: GET {url}?page={page}&per_page={per_page}")
        response = await client.get(url, params={"page": page, "per_page": per_page})
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"上游请求失败: {url} {e.response.status_code} - {e.response.text}")
            raise
        return response.json()

    async def get_all_orders(self, page: int, per_page: int) -> CombinedOrdersPage:
        """拉取两边同一页订单并合并；orders 返回完整合并集，total/totalPages 只是元数据。"""
        async with httpx.AsyncClient(
            timeout=self.settings.UPSTREAM_TIMEOUT_SECONDS,
            transport=self.transport,
        ) as client:
            woo_data = await self._fetch_json(client, "/api/woo/get-orders", page, per_page)
            wp_data = await self._fetch_json(client, "/api/wp/get-orders", page, per_page)

        woo_orders = storefront_orders_from_payload(woo_data)
        wp_orders = content_orders_from_payload(wp_data)
        logger.info(f"WooCommerce 订单数: {len(woo_orders)}")
        logger.info(f"WordPress 订单数: {len(wp_orders)}")

        merged = merge_orders(woo_orders, wp_orders)
        total = len(merged)
        pages = total_pages(total, per_page)
        logger.info(f"合并后订单数: {total}，总页数: {pages}")

        return CombinedOrdersPage(
            orders=merged,
            total=total,
            totalPages=pages,
            page=page,
            per_page=per_page,
            debug=CombinedOrdersDebug(
                wooOrdersCount=len(woo_orders),
                wpOrdersCount=len(wp_orders),
                uniqueOrdersCount=total,
            ),
        )
