"""
配置管理模块
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

# 获取项目根目录
PROJECT_ROOT = Path(__file__).parent.parent.parent


class Settings(BaseSettings):
    """应用配置"""

    # 环境
    ENV: str = "dev"

    # 应用配置
    APP_NAME: str = "OrderHub Admin"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # WooCommerce 店铺（订单主数据）
    WOOCOMMERCE_STORE_URL: str
    WOOCOMMERCE_API_VERSION: str = "wc/v3"
    WOOCOMMERCE_CONSUMER_KEY: Optional[str] = None
    WOOCOMMERCE_CONSUMER_SECRET: Optional[str] = None

    # WordPress 自定义订单接口（保修照片、邮件/付款标记）
    WORDPRESS_USERNAME: Optional[str] = None
    WORDPRESS_PASSWORD: Optional[str] = None

    # 合并订单接口默认分页参数（字符串，与查询参数一致）
    DEFAULT_PAGE: str = "1"
    DEFAULT_PER_PAGE: str = "20"
    UPSTREAM_TIMEOUT_SECONDS: float = 30.0

    # 报价单 PDF 抬头
    COMPANY_NAME: str = "Mario Hans Rental"
    COMPANY_RUT: str = ""
    COMPANY_ADDRESS: str = ""
    COMPANY_EMAIL: str = ""

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    @property
    def storefront_api_url(self) -> str:
        """WooCommerce REST API 基础 URL"""
        return f"{self.WOOCOMMERCE_STORE_URL.rstrip('/')}/wp-json/{self.WOOCOMMERCE_API_VERSION}"

    @property
    def content_orders_url(self) -> str:
        """WordPress 自定义订单端点"""
        return f"{self.WOOCOMMERCE_STORE_URL.rstrip('/')}/wp-json/custom/v1/orders"

    def has_storefront_credentials(self) -> bool:
        """是否配置了 consumer key + secret"""
        return bool(self.WOOCOMMERCE_CONSUMER_KEY and self.WOOCOMMERCE_CONSUMER_SECRET)

    def has_content_credentials(self) -> bool:
        """是否配置了 WordPress 管理员账号"""
        return bool(self.WORDPRESS_USERNAME and self.WORDPRESS_PASSWORD)


@lru_cache
def get_settings() -> Settings:
    """获取配置单例"""
    return Settings()
