"""
PDF 文本格式化：智利比索、日期（DD-MM-AAAA / 西语长日期）、编号、订单状态西语名称。
"""
import re
import time
from datetime import date, datetime
from typing import Optional, Union

from loguru import logger

MONTHS_ES = [
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
]

STATUS_ES: dict[str, str] = {
    "pending": "Pendiente",
    "processing": "En Proceso",
    "on-hold": "En Espera",
    "completed": "Completado",
    "cancelled": "Cancelado",
    "refunded": "Reembolsado",
    "failed": "Fallido",
    "draft": "Borrador",
    "trash": "Eliminado",
}

_DDMMAAAA = re.compile(r"^\d{2}-\d{2}-\d{4}$")


def format_clp(amount: float) -> str:
    """1234567.4 -> "$1.234.567"（CLP 无小数，千分位用点）"""
    rounded = int(round(amount))
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,}".replace(",", ".")


def _parse_date(value: str) -> Optional[datetime]:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def format_date_ddmmaaaa(value: Optional[str]) -> str:
    """ISO 日期 -> DD-MM-AAAA；已是该格式或无法解析时原样返回"""
    if not value:
        return ""
    if _DDMMAAAA.match(value):
        return value
    parsed = _parse_date(value)
    if parsed is None:
        logger.debug(f"无法解析日期: {value}")
        return value
    return parsed.strftime("%d-%m-%Y")


def format_date_long(value: Union[date, datetime, str]) -> str:
    """西语长日期，如 1 de enero de 2025"""
    if isinstance(value, str):
        parsed = _parse_date(value)
        if parsed is None:
            return value
        value = parsed
    return f"{value.day} de {MONTHS_ES[value.month - 1]} de {value.year}"


def generate_budget_number(order_id: int) -> str:
    """PRES-{订单号}-{毫秒时间戳后 6 位}"""
    return f"PRES-{order_id}-{str(int(time.time() * 1000))[-6:]}"


def order_status_in_spanish(status: str) -> str:
    if not status:
        return ""
    return STATUS_ES.get(status, status[:1].upper() + status[1:])
