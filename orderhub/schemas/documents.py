"""
PDF 文档数据结构
"""
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict


class BillingInfo(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: Optional[str] = None
    company: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    rut: Optional[str] = None


class ProjectInfo(BaseModel):
    name: str = "Proyecto de Arriendo"
    start_date: str = ""
    end_date: str = ""
    num_jornadas: int = 1
    company_rut: Optional[str] = None
    retire_name: Optional[str] = None
    retire_phone: Optional[str] = None
    retire_rut: Optional[str] = None
    comments: Optional[str] = None


class LineItem(BaseModel):
    name: str
    sku: Optional[str] = None
    price: float
    quantity: int


class TotalsInfo(BaseModel):
    subtotal: float
    discount: float = 0
    iva: float
    total: float
    reserve: float


class ShippingInfo(BaseModel):
    method: str
    total: float = 0
    delivery_method: Optional[Literal["pickup", "shipping"]] = None
    shipping_address: Optional[str] = None
    shipping_phone: Optional[str] = None


class BudgetDocumentData(BaseModel):
    """报价单（Presupuesto）"""
    order_id: int
    billing: BillingInfo
    project: ProjectInfo
    line_items: list[LineItem] = []
    totals: TotalsInfo
    coupon_code: Optional[str] = None
    status: str
    shipping_info: Optional[ShippingInfo] = None

    model_config = ConfigDict(from_attributes=True)


class GenerateBudgetRequest(BaseModel):
    order_id: Optional[int] = None
