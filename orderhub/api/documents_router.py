"""
订单文档接口：报价单 PDF。
"""
from typing import Optional

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response
from loguru import logger
from starlette.concurrency import run_in_threadpool

from orderhub.api.dependencies import get_upstream_transport
from orderhub.pdf.budget import budget_from_order, render_budget_pdf
from orderhub.schemas.base import ErrorResponse
from orderhub.schemas.documents import GenerateBudgetRequest
from orderhub.services.storefront_service import OrderNotFoundError, StorefrontService

router = APIRouter(prefix="/api/order", tags=["Documents"])


@router.post("/generate-budget-pdf")
async def generate_budget_pdf(
    body: GenerateBudgetRequest,
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_upstream_transport),
):
    """按 WooCommerce 订单生成报价单 PDF"""
    if not body.order_id:
        return JSONResponse(status_code=400, content={
            "success": False,
            "message": "Campos requeridos faltantes: order_id",
        })

    logger.info(f"📋 报价单 PDF 请求: order_id={body.order_id}")
    try:
        service = StorefrontService(transport=transport)
        order = await service.get_order(body.order_id)
        # reportlab 为同步渲染，放到线程池避免阻塞事件循环
        pdf_bytes = await run_in_threadpool(render_budget_pdf, budget_from_order(order))
    except OrderNotFoundError:
        logger.warning(f"订单不存在: {body.order_id}")
        return JSONResponse(status_code=404, content={
            "success": False,
            "message": "Orden no encontrada",
        })
    except Exception as e:
        logger.exception(f"报价单 PDF 生成失败: {str(e)}")
        error = ErrorResponse.from_exception("Error al generar el presupuesto", e, include_stack=False)
        return JSONResponse(status_code=500, content=error.model_dump(mode="json", exclude_none=True))

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="Presupuesto_{body.order_id}.pdf"'},
    )
