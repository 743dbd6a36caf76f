"""
报价单（Presupuesto）PDF 生成 - reportlab canvas
版式坐标以 SVG viewBox (1400 x 1500) 书写，经 coordinates 模块映射到 A4 点坐标；
商品行超出页面时自动换页，页脚为「Página X de Y」。
"""
import io
from datetime import datetime
from typing import Any, Optional

from loguru import logger
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from orderhub.core.config import Settings, get_settings
from orderhub.pdf.calculations import calculate_item_subtotal, calculate_order_totals, RESERVE_RATE
from orderhub.pdf.coordinates import (
    A4_CONFIG,
    svg_font_size_to_points,
    svg_height_to_points,
    svg_position,
    svg_width_to_points,
    svg_x_to_points,
    svg_y_to_points,
)
from orderhub.pdf.formatters import (
    format_clp,
    format_date_ddmmaaaa,
    format_date_long,
    generate_budget_number,
    order_status_in_spanish,
)
from orderhub.schemas.documents import (
    BillingInfo,
    BudgetDocumentData,
    LineItem,
    ProjectInfo,
    ShippingInfo,
    TotalsInfo,
)

ACCENT = colors.HexColor("#1F4E79")
MUTED = colors.HexColor("#6B7280")
ROW_FILL = colors.HexColor("#F3F4F6")

ROW_HEIGHT = 45
TABLE_TOP_FIRST_PAGE = 640
TABLE_TOP_NEXT_PAGES = 120
CONTENT_BOTTOM = 1380
TOTALS_BLOCK_HEIGHT = 7 * ROW_HEIGHT

# (标题, x, 对齐)
COLUMNS = [
    ("Producto", 80, "left"),
    ("SKU", 640, "left"),
    ("Precio", 940, "right"),
    ("Cant.", 1040, "right"),
    ("Jornadas", 1160, "right"),
    ("Total", 1320, "right"),
]


class PdfGenerationError(RuntimeError):
    """PDF 生成失败或输出不是合法 PDF"""


def _meta(order: dict, key: str) -> Any:
    """兼容精简结构（metadata 字典）与原始结构（meta_data 列表）"""
    metadata = order.get("metadata")
    if isinstance(metadata, dict) and metadata.get(key):
        return metadata[key]
    for meta in order.get("meta_data") or []:
        if meta.get("key") == key:
            return meta.get("value")
    return None


def _to_float(value: Any) -> Optional[float]:
    try:
        return float(value) if value not in (None, "") else None
    except (TypeError, ValueError):
        return None


def _shipping_from_order(order: dict) -> Optional[ShippingInfo]:
    lines = order.get("shipping_lines") or []
    if not lines:
        return None
    line = lines[0]
    meta = {m.get("key"): m.get("value") for m in line.get("meta_data") or [] if isinstance(m, dict)}
    delivery = meta.get("delivery_method")
    if delivery not in ("pickup", "shipping"):
        delivery = "pickup" if line.get("method_id") == "pickup" else "shipping"
    return ShippingInfo(
        method=line.get("method_title") or line.get("method_id") or "Delivery",
        total=_to_float(line.get("total")) or 0,
        delivery_method=delivery,
        shipping_address=meta.get("shipping_address"),
        shipping_phone=meta.get("shipping_phone"),
    )


def budget_from_order(order: dict, customer_rut: str = "") -> BudgetDocumentData:
    """WooCommerce 订单 -> 报价单数据；metadata 中没有 calculated_* 时按商品行重新计算"""
    billing = order.get("billing") or {}
    num_jornadas = int(_to_float(_meta(order, "num_jornadas")) or 1)
    line_items = [
        LineItem(
            name=item.get("name") or "",
            sku=item.get("sku") or None,
            price=_to_float(item.get("price")) or 0,
            quantity=int(item.get("quantity") or 0),
        )
        for item in order.get("line_items") or []
    ]

    discount = _to_float(_meta(order, "calculated_discount")) or 0
    total = _to_float(_meta(order, "calculated_total"))
    if total is None:
        computed = calculate_order_totals(line_items, num_jornadas, discount)
        totals = TotalsInfo(
            subtotal=computed.subtotal,
            discount=discount,
            iva=computed.iva,
            total=computed.total,
            reserve=computed.reserve,
        )
    else:
        totals = TotalsInfo(
            subtotal=_to_float(_meta(order, "calculated_subtotal")) or 0,
            discount=discount,
            iva=_to_float(_meta(order, "calculated_iva")) or 0,
            total=total,
            reserve=total * RESERVE_RATE,
        )

    coupons = order.get("coupon_lines") or []
    return BudgetDocumentData(
        order_id=order["id"],
        billing=BillingInfo(
            first_name=billing.get("first_name") or "",
            last_name=billing.get("last_name") or "",
            email=billing.get("email") or "",
            phone=billing.get("phone") or None,
            company=billing.get("company") or None,
            address=billing.get("address_1") or None,
            city=billing.get("city") or None,
            rut=customer_rut or None,
        ),
        project=ProjectInfo(
            name=_meta(order, "order_proyecto") or "Proyecto de Arriendo",
            start_date=format_date_ddmmaaaa(_meta(order, "order_fecha_inicio") or ""),
            end_date=format_date_ddmmaaaa(_meta(order, "order_fecha_termino") or ""),
            num_jornadas=num_jornadas,
            company_rut=_meta(order, "company_rut"),
            retire_name=_meta(order, "order_retire_name"),
            retire_phone=_meta(order, "order_retire_phone"),
            retire_rut=_meta(order, "order_retire_rut"),
            comments=_meta(order, "order_comments"),
        ),
        line_items=line_items,
        totals=totals,
        coupon_code=coupons[0].get("code") if coupons else None,
        status=order_status_in_spanish(order.get("status") or "on-hold"),
        shipping_info=_shipping_from_order(order),
    )


class NumberedCanvas(canvas.Canvas):
    """先缓存每页状态，保存时统一绘制「Página X de Y」"""

    def __init__(self, *args, **kwargs):
        canvas.Canvas.__init__(self, *args, **kwargs)
        self._saved_page_states = []

    @property
    def page_count(self) -> int:
        return len(self._saved_page_states)

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        num_pages = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self.draw_page_footer(num_pages)
            canvas.Canvas.showPage(self)
        canvas.Canvas.save(self)

    def draw_page_footer(self, page_count):
        self.saveState()
        self.setFont("Helvetica", 8)
        self.setFillColor(MUTED)
        self.drawCentredString(A4[0] / 2.0, 20, f"Página {self._pageNumber} de {page_count}")
        self.restoreState()


class BudgetRenderer:
    """在 SVG 坐标系中排版，输出 A4"""

    def __init__(self, data: BudgetDocumentData, settings: Optional[Settings] = None):
        self.data = data
        self.settings = settings or get_settings()
        self.config = A4_CONFIG
        self.buffer = io.BytesIO()
        self.canvas = NumberedCanvas(self.buffer, pagesize=A4)

    def _text(self, svg_x: float, svg_y: float, text: Any, size: float = 24,
              bold: bool = False, align: str = "left", color=colors.black):
        c = self.canvas
        c.setFont("Helvetica-Bold" if bold else "Helvetica", svg_font_size_to_points(size, self.config))
        c.setFillColor(color)
        pos = svg_position(svg_x, svg_y, self.config)
        x, y = pos["left"], self.config.page_height - pos["top"]
        value = "" if text is None else str(text)
        if align == "right":
            c.drawRightString(x, y, value)
        elif align == "center":
            c.drawCentredString(x, y, value)
        else:
            c.drawString(x, y, value)

    def _hline(self, svg_y: float, x1: float = 80, x2: float = 1320, color=ACCENT):
        c = self.canvas
        c.setStrokeColor(color)
        y = self.config.page_height - svg_y_to_points(svg_y, self.config)
        c.line(svg_x_to_points(x1, self.config), y, svg_x_to_points(x2, self.config), y)

    def _row_fill(self, svg_y: float):
        c = self.canvas
        c.setFillColor(ROW_FILL)
        top = self.config.page_height - svg_y_to_points(svg_y - 30, self.config)
        height = svg_height_to_points(ROW_HEIGHT, self.config)
        c.rect(svg_x_to_points(70, self.config), top - height,
               svg_width_to_points(1260, self.config), height, stroke=0, fill=1)

    def draw_header(self):
        s = self.settings
        self._text(80, 90, s.COMPANY_NAME, size=46, bold=True, color=ACCENT)
        for offset, line in enumerate(filter(None, [s.COMPANY_RUT and f"RUT: {s.COMPANY_RUT}",
                                                   s.COMPANY_ADDRESS, s.COMPANY_EMAIL])):
            self._text(80, 140 + offset * 35, line, size=24, color=MUTED)
        self._text(1320, 90, "PRESUPUESTO", size=42, bold=True, align="right", color=ACCENT)
        self._text(1320, 140, f"N° {generate_budget_number(self.data.order_id)}", size=24, align="right")
        self._text(1320, 175, format_date_long(datetime.now()), size=24, align="right")
        self._text(1320, 210, f"Estado: {self.data.status}", size=24, align="right")
        self._hline(250)

    def draw_parties(self):
        billing = self.data.billing
        project = self.data.project
        self._text(80, 310, "Cliente", size=30, bold=True, color=ACCENT)
        client_lines = [
            f"{billing.first_name} {billing.last_name}".strip(),
            billing.company,
            billing.rut and f"RUT: {billing.rut}",
            billing.email,
            billing.phone,
            ", ".join(filter(None, [billing.address, billing.city])),
        ]
        for offset, line in enumerate(filter(None, client_lines)):
            self._text(80, 355 + offset * 38, line, size=24)

        self._text(740, 310, "Proyecto", size=30, bold=True, color=ACCENT)
        project_lines = [
            project.name,
            f"Desde {project.start_date} hasta {project.end_date}",
            f"Jornadas: {project.num_jornadas}",
            project.company_rut and f"RUT empresa: {project.company_rut}",
            project.retire_name and f"Retira: {project.retire_name} {project.retire_phone or ''}".strip(),
        ]
        for offset, line in enumerate(filter(None, project_lines)):
            self._text(740, 355 + offset * 38, line, size=24)

    def draw_table_header(self, svg_y: float):
        for title, x, align in COLUMNS:
            self._text(x, svg_y, title, size=24, bold=True, align=align, color=ACCENT)
        self._hline(svg_y + 15)

    def new_page(self) -> float:
        self.canvas.showPage()
        self.draw_table_header(TABLE_TOP_NEXT_PAGES)
        return TABLE_TOP_NEXT_PAGES + ROW_HEIGHT + 10

    def draw_items(self) -> float:
        jornadas = self.data.project.num_jornadas
        self.draw_table_header(TABLE_TOP_FIRST_PAGE)
        y = TABLE_TOP_FIRST_PAGE + ROW_HEIGHT + 10
        for index, item in enumerate(self.data.line_items):
            if y > CONTENT_BOTTOM:
                y = self.new_page()
            if index % 2 == 0:
                self._row_fill(y)
            row_total = calculate_item_subtotal(item.price, item.quantity, jornadas)
            self._text(80, y, item.name[:48], size=22)
            self._text(640, y, item.sku or "-", size=22)
            self._text(940, y, format_clp(item.price), size=22, align="right")
            self._text(1040, y, item.quantity, size=22, align="right")
            self._text(1160, y, jornadas, size=22, align="right")
            self._text(1320, y, format_clp(row_total), size=22, align="right")
            y += ROW_HEIGHT
        return y

    def draw_totals(self, svg_y: float):
        if svg_y + TOTALS_BLOCK_HEIGHT > CONTENT_BOTTOM + ROW_HEIGHT:
            self.canvas.showPage()
            svg_y = TABLE_TOP_NEXT_PAGES
        totals = self.data.totals
        rows: list[tuple[str, float]] = [("Subtotal", totals.subtotal)]
        if totals.discount:
            label = f"Descuento ({self.data.coupon_code})" if self.data.coupon_code else "Descuento"
            rows.append((label, -totals.discount))
        if self.data.shipping_info and self.data.shipping_info.total:
            rows.append((f"Envío: {self.data.shipping_info.method}", self.data.shipping_info.total))
        rows.append(("IVA (19%)", totals.iva))
        rows.append(("Total", totals.total))
        rows.append(("Reserva (25%)", totals.reserve))

        self._hline(svg_y, x1=800)
        y = svg_y + ROW_HEIGHT
        for label, amount in rows:
            bold = label == "Total"
            self._text(1100, y, label, size=24, bold=bold, align="right")
            self._text(1320, y, format_clp(amount), size=24, bold=bold, align="right")
            y += ROW_HEIGHT

    def render(self) -> bytes:
        self.draw_header()
        self.draw_parties()
        end_y = self.draw_items()
        self.draw_totals(end_y + 20)
        self.canvas.showPage()
        self.canvas.save()
        return self.buffer.getvalue()


def render_budget_pdf(data: BudgetDocumentData, settings: Optional[Settings] = None) -> bytes:
    """生成报价单 PDF，返回字节；输出不是 %PDF 开头时抛 PdfGenerationError"""
    logger.info(f"🚀 开始生成报价单 PDF: order_id={data.order_id}")
    try:
        pdf_bytes = BudgetRenderer(data, settings).render()
    except Exception as e:
        logger.exception(f"报价单 PDF 生成失败: {str(e)}")
        raise PdfGenerationError(f"PDF generation failed: {e}") from e

    if not pdf_bytes.startswith(b"%PDF"):
        logger.error(f"生成内容不是合法 PDF，前 100 字节: {pdf_bytes[:100]!r}")
        raise PdfGenerationError("Generated content is not a valid PDF")

    logger.info(f"✅ 报价单 PDF 生成成功，大小: {len(pdf_bytes)} bytes")
    return pdf_bytes
