"""
订单接口：WooCommerce / WordPress 单来源订单、合并订单、订单统计。
"""
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from loguru import logger

from orderhub.api.dependencies import get_upstream_transport
from orderhub.core.config import get_settings
from orderhub.order_utils import compute_order_stats, parse_page_param
from orderhub.schemas.base import BaseResponse, ErrorResponse
from orderhub.schemas.orders import CombinedOrdersPage, OrderStats
from orderhub.services.combined_service import CombinedOrdersService
from orderhub.services.content_service import ContentService
from orderhub.services.storefront_service import StorefrontService

router = APIRouter(prefix="/api", tags=["Orders"])


def _error_body(response: httpx.Response):
    try:
        return response.json()
    except ValueError:
        return response.text


@router.get("/get-all-orders")
async def get_all_orders(
    request: Request,
    page: Optional[str] = None,
    per_page: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_upstream_transport),
):
    """合并 WooCommerce 与 WordPress 订单"""
    settings = get_settings()
    try:
        page_no = parse_page_param(page, settings.DEFAULT_PAGE)
        per_page_no = parse_page_param(per_page, settings.DEFAULT_PER_PAGE)
        service = CombinedOrdersService(str(request.base_url), transport=transport)
        result = await service.get_all_orders(page_no, per_page_no)
    except Exception as e:
        logger.exception(f"合并订单获取失败: {str(e)}")
        body = ErrorResponse.from_exception("Error fetching combined orders", e)
        return JSONResponse(status_code=500, content=body.model_dump(mode="json", exclude_none=True))

    return BaseResponse[CombinedOrdersPage](
        message="Orders fetched successfully",
        data=result,
    ).model_dump(mode="json")


@router.get("/woo/get-orders")
async def woo_get_orders(
    page: str = "1",
    per_page: str = "10",
    status: str = "",
    customer: str = "",
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_upstream_transport),
):
    """WooCommerce 订单（精简字段）"""
    try:
        service = StorefrontService(transport=transport)
        result = await service.get_orders(page=page, per_page=per_page, status=status, customer=customer)
    except Exception as e:
        logger.exception(f"获取 WooCommerce 订单失败: {str(e)}")
        details = {"message": str(e), "status": None, "statusText": None, "data": None}
        if isinstance(e, httpx.HTTPStatusError):
            details.update(
                status=e.response.status_code,
                statusText=e.response.reason_phrase,
                data=_error_body(e.response),
            )
        return JSONResponse(status_code=500, content={
            "success": False,
            "message": "Error al obtener las órdenes",
            "error": str(e),
            "details": details,
        })

    return {
        "success": True,
        "message": "Órdenes obtenidas exitosamente",
        "data": result,
    }


@router.get("/wp/get-orders")
async def wp_get_orders(
    page: str = "1",
    per_page: str = "100",
    status: str = "",
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_upstream_transport),
):
    """WordPress 订单（原样返回上游 JSON）"""
    try:
        service = ContentService(transport=transport)
        response = await service.get_orders(page=page, per_page=per_page, status=status)
        if response.is_error:
            return _wordpress_error(response)
        orders = response.json()
    except Exception as e:
        logger.exception(f"获取 WordPress 订单失败: {str(e)}")
        return JSONResponse(status_code=500, content={
            "error": "Failed to fetch orders",
            "message": str(e) or "Unknown error occurred",
        })

    return {
        "orders": orders,
        "total": response.headers.get("X-WP-Total"),
        "totalPages": response.headers.get("X-WP-TotalPages"),
    }


def _wordpress_error(response: httpx.Response) -> JSONResponse:
    """上游错误状态码原样透传"""
    try:
        error_data = response.json()
    except ValueError:
        return JSONResponse(status_code=response.status_code, content={
            "error": f"WordPress API responded with status: {response.status_code}",
            "message": response.reason_phrase,
        })

    if response.status_code == 401:
        return JSONResponse(status_code=401, content={
            "error": "Error de autenticación",
            "message": "Credenciales inválidas para la API de WordPress",
            "details": error_data,
        })

    message = error_data.get("message") if isinstance(error_data, dict) else None
    return JSONResponse(status_code=response.status_code, content={
        "error": "Error en API de WordPress",
        "status": response.status_code,
        "message": message or "Error desconocido",
        "details": error_data,
    })


@router.get("/orders/stats")
async def order_stats(
    request: Request,
    page: Optional[str] = None,
    per_page: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_upstream_transport),
):
    """基于合并订单的统计"""
    settings = get_settings()
    try:
        service = CombinedOrdersService(str(request.base_url), transport=transport)
        result = await service.get_all_orders(
            parse_page_param(page, settings.DEFAULT_PAGE),
            parse_page_param(per_page, settings.DEFAULT_PER_PAGE),
        )
        stats = compute_order_stats(result.orders)
    except Exception as e:
        logger.exception(f"订单统计失败: {str(e)}")
        return JSONResponse(status_code=500, content={
            "success": False,
            "error": "Error al obtener estadísticas de órdenes",
        })

    return BaseResponse[OrderStats](message="Estadísticas obtenidas", data=stats).model_dump(mode="json")
