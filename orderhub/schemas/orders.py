"""
订单相关 Schema

两个来源共用同一个整数订单 ID 空间（约定，未校验）:
  storefront: WooCommerce 订单（账单、商品行、metadata 含 calculated_total）
  content:    WordPress 自定义订单接口（保修照片 fotos_garantia、correo_enviado、pago_completo）

合并结果 MergedOrder 按 source 区分三种形态:
  "both"       -> storefront 记录为主体，secondary_data 挂 content 记录
  "storefront" -> storefront 记录，secondary_data = None
  "content"    -> 由 content 记录合成的最小订单，primary_data = None
"""
from typing import Annotated, Any, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

class StorefrontOrder(BaseModel):
    """WooCommerce 订单（字段原样保留，仅要求 id）"""
    id: int

    model_config = ConfigDict(extra="allow")


class ContentOrder(BaseModel):
    """WordPress 订单；fotos_garantia 缺失或为空时为 []，两个标记缺失或为空时为 False，其余值原样保留"""
    id: int
    fotos_garantia: list[Any] = []
    correo_enviado: Any = False
    pago_completo: Any = False

    model_config = ConfigDict(extra="allow")

    @field_validator("fotos_garantia", mode="before")
    @classmethod
    def _default_photos(cls, value: Any) -> Any:
        return value or []

    @field_validator("correo_enviado", "pago_completo", mode="before")
    @classmethod
    def _default_flag(cls, value: Any) -> Any:
        # 插件中为自由文本（如付款说明），仅空值归一为 False
        return value or False


class BothSourcesOrder(BaseModel):
    source: Literal["both"] = "both"
    id: int
    secondary_data: ContentOrder

    model_config = ConfigDict(extra="allow")


class StorefrontOnlyOrder(BaseModel):
    source: Literal["storefront"] = "storefront"
    id: int
    secondary_data: None = None

    model_config = ConfigDict(extra="allow")


class ContentOnlyOrder(BaseModel):
    source: Literal["content"] = "content"
    id: int
    status: Optional[Any] = None
    date_created: Optional[Any] = None
    total: Optional[Any] = None
    customer: Optional[Any] = None
    primary_data: None = None
    secondary_data: ContentOrder


MergedOrder = Annotated[
    Union[BothSourcesOrder, StorefrontOnlyOrder, ContentOnlyOrder],
    Field(discriminator="source"),
]


class CombinedOrdersDebug(BaseModel):
    """合并过程计数，便于排查"""
    wooOrdersCount: int
    wpOrdersCount: int
    uniqueOrdersCount: int


class CombinedOrdersPage(BaseModel):
    """合并订单响应 data 部分；orders 为完整合并集，total/totalPages 仅作元数据"""
    orders: list[MergedOrder]
    total: int
    totalPages: int
    page: int
    per_page: int
    debug: CombinedOrdersDebug


class OrderStats(BaseModel):
    """订单统计"""
    totalOrders: int
    statusCounts: dict[str, int]
    totalRevenue: str
    monthlyOrders: int
    averageOrderValue: str
    pendingOrders: int
    processingOrders: int
    completedOrders: int
    cancelledOrders: int
