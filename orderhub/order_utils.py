"""
合并订单接口共用：两个来源的订单按 ID 合并、分页元数据、订单统计。
"""
import math
import re
from datetime import datetime
from typing import Any, Optional

from loguru import logger

from orderhub.schemas.orders import (
    BothSourcesOrder,
    ContentOnlyOrder,
    ContentOrder,
    MergedOrder,
    OrderStats,
    StorefrontOnlyOrder,
    StorefrontOrder,
)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _list_at(payload: Any, *keys: str, source: str) -> list[dict]:
    """按 keys 逐层取列表；结构不符时返回空列表（只记 warning，不让整个请求失败）。"""
    node = payload
    for key in keys:
        if not isinstance(node, dict):
            node = None
            break
        node = node.get(key)
    if isinstance(node, list):
        return node
    logger.warning(f"{source} 响应缺少 {'.'.join(keys)} 列表，按空列表处理")
    return []


def storefront_orders_from_payload(payload: Any) -> list[dict]:
    """/api/woo/get-orders 响应 -> 订单列表（data.orders）"""
    return _list_at(payload, "data", "orders", source="WooCommerce")


def content_orders_from_payload(payload: Any) -> list[dict]:
    """/api/wp/get-orders 响应 -> 订单列表（orders.orders）"""
    return _list_at(payload, "orders", "orders", source="WordPress")


def merge_orders(
    storefront_orders: list[dict],
    content_orders: list[dict],
) -> list[MergedOrder]:
    """
    按订单 ID 合并两个来源，每个 ID 只输出一次。
    顺序固定：先按 storefront 列表中首次出现的顺序，再接仅存在于 content 列表的 ID（按其出现顺序）。
    同一列表内 ID 重复时以最后一条为准。
    """
    primary: dict[int, StorefrontOrder] = {}
    for raw in storefront_orders:
        order = StorefrontOrder.model_validate(raw)
        primary[order.id] = order

    secondary: dict[int, ContentOrder] = {}
    for raw in content_orders:
        order = ContentOrder.model_validate(raw)
        secondary[order.id] = order

    order_ids = list(primary) + [oid for oid in secondary if oid not in primary]

    merged: list[MergedOrder] = []
    for order_id in order_ids:
        woo_order = primary.get(order_id)
        wp_order = secondary.get(order_id)

        if woo_order is not None and wp_order is not None:
            merged.append(BothSourcesOrder.model_validate({
                **woo_order.model_dump(),
                "source": "both",
                "secondary_data": wp_order,
            }))
        elif woo_order is not None:
            merged.append(StorefrontOnlyOrder.model_validate({
                **woo_order.model_dump(),
                "source": "storefront",
                "secondary_data": None,
            }))
        else:
            extra = wp_order.model_extra or {}
            merged.append(ContentOnlyOrder(
                id=order_id,
                status=extra.get("status"),
                date_created=extra.get("date_created"),
                total=extra.get("total"),
                customer=extra.get("customer"),
                secondary_data=wp_order,
            ))
    return merged


def parse_page_param(value: Optional[str], default: str) -> int:
    """查询参数转整数，取开头的整数部分（"12abc" -> 12，"1.5" -> 1）；
    缺省或不以数字开头时用默认值。0 和负数原样返回。"""
    match = _LEADING_INT.match(value) if value else None
    return int(match.group(1)) if match else int(default)


def total_pages(total: int, per_page: int) -> int:
    """ceil(total / per_page)，仅作元数据，不切分结果。"""
    if per_page <= 0:
        raise ValueError(f"per_page must be a positive integer, got {per_page}")
    return math.ceil(total / per_page)


def parse_order_date(value: Any) -> Optional[datetime]:
    """解析订单 date_created（WooCommerce 为 ISO 字符串）。"""
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _in_timezone_of(created: Optional[datetime], now: datetime) -> Optional[datetime]:
    """把订单时间换算到 now 的时区，使两者可比较。"""
    if created is None:
        return None
    if now.tzinfo is None:
        return created.astimezone().replace(tzinfo=None) if created.tzinfo else created
    if created.tzinfo is None:
        return created.replace(tzinfo=now.tzinfo)
    return created.astimezone(now.tzinfo)


def _to_float(value: Any) -> float:
    try:
        return float(value) if value not in (None, "") else 0.0
    except (TypeError, ValueError):
        return 0.0


def order_total(record: dict) -> float:
    """订单金额：优先 metadata.calculated_total，其次 total。"""
    metadata = record.get("metadata") or {}
    return _to_float(metadata.get("calculated_total") or record.get("total"))


def compute_order_stats(orders: list[MergedOrder], now: Optional[datetime] = None) -> OrderStats:
    """按状态计数、已完成订单收入、本月订单数、平均订单金额。"""
    now = now or datetime.now()
    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    status_counts: dict[str, int] = {}
    total_revenue = 0.0
    monthly_orders = 0
    for order in orders:
        record = order.model_dump()
        status = record.get("status") or "unknown"
        status_counts[status] = status_counts.get(status, 0) + 1
        if status == "completed":
            total_revenue += order_total(record)
        created = _in_timezone_of(parse_order_date(record.get("date_created")), now)
        if created is not None and created >= month_start:
            monthly_orders += 1

    total_orders = len(orders)
    average = f"{total_revenue / total_orders:.2f}" if total_orders else "0"
    return OrderStats(
        totalOrders=total_orders,
        statusCounts=status_counts,
        totalRevenue=f"{total_revenue:.2f}",
        monthlyOrders=monthly_orders,
        averageOrderValue=average,
        pendingOrders=status_counts.get("pending", 0),
        processingOrders=status_counts.get("processing", 0),
        completedOrders=status_counts.get("completed", 0),
        cancelledOrders=status_counts.get("cancelled", 0),
    )
