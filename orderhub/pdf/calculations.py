"""
报价单金额计算：IVA 19%，预留金（reserve）为含税总额的 25%。
"""
from dataclasses import dataclass
from typing import Any, Iterable

IVA_RATE = 0.19
RESERVE_RATE = 0.25


@dataclass(frozen=True)
class PriceCalculation:
    subtotal: float
    iva: float
    total: float
    reserve: float


def _price(item: Any) -> float:
    price = item["price"] if isinstance(item, dict) else item.price
    return float(price or 0)


def _quantity(item: Any) -> int:
    quantity = item["quantity"] if isinstance(item, dict) else item.quantity
    return int(quantity or 0)


def calculate_order_totals(
    line_items: Iterable[Any],
    num_jornadas: int,
    discount: float = 0,
) -> PriceCalculation:
    """订单合计：商品单价 × 数量 × 天数，扣减折扣后计税"""
    subtotal = sum(_price(it) * _quantity(it) * num_jornadas for it in line_items)
    discounted = subtotal - discount
    iva = discounted * IVA_RATE
    total = discounted + iva
    return PriceCalculation(subtotal=subtotal, iva=iva, total=total, reserve=total * RESERVE_RATE)


def calculate_item_subtotal(price: float, quantity: int, jornadas: int) -> float:
    return price * quantity * jornadas
