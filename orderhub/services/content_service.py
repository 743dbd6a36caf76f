"""
WordPress 自定义订单接口服务层
GET {store}/wp-json/custom/v1/orders，HTTP Basic 认证（管理员账号）
"""
import httpx
from loguru import logger
from typing import Optional, Any

from orderhub.core.config import get_settings


class ContentService:
    """WordPress 订单服务（保修照片、邮件/付款标记）"""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = get_settings()
        self.orders_url = self.settings.content_orders_url
        self.transport = transport
        if not self.settings.has_content_credentials():
            raise ValueError("WordPress credentials or URL are not configured")

    async def get_orders(
        self,
        page: str = "1",
        per_page: str = "100",
        status: str = "",
    ) -> httpx.Response:
        """
        获取订单列表，返回原始 httpx.Response（状态码由调用方判断）。
        """
        params: dict[str, Any] = {"page": page, "per_page": per_page}
        if status:
            params["status"] = status

        logger.info(f"请求 WordPress: GET {self.orders_url}")
        logger.debug(f"params: {params}")

        async with httpx.AsyncClient(
            timeout=self.settings.UPSTREAM_TIMEOUT_SECONDS,
            transport=self.transport,
        ) as client:
            response = await client.get(
                self.orders_url,
                params=params,
                auth=(self.settings.WORDPRESS_USERNAME, self.settings.WORDPRESS_PASSWORD),
                headers={"Accept": "application/json"},
            )
        if response.is_error:
            logger.error(f"WordPress 请求失败: {response.status_code} - {response.text}")
        else:
            logger.info("WordPress 请求成功")
        return response
