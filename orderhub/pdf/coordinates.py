"""
SVG viewBox 坐标 -> PDF 页面点（1 pt = 1/72 inch）的线性映射。
版式按 viewBox="0 0 1400 {高度}" 设计，输出为 A4 (595.28 x 841.89 pt)。
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class SvgToPointsConfig:
    svg_width: float
    svg_height: float
    page_width: float
    page_height: float


A4_CONFIG = SvgToPointsConfig(
    svg_width=1400,
    svg_height=1500,
    page_width=595.28,
    page_height=841.89,
)

# 字号按宽度缩放后再乘 0.8，视觉上更接近原版式
FONT_SIZE_FACTOR = 0.8


def svg_x_to_points(svg_x: float, config: SvgToPointsConfig = A4_CONFIG) -> float:
    return svg_x / config.svg_width * config.page_width


def svg_y_to_points(svg_y: float, config: SvgToPointsConfig = A4_CONFIG) -> float:
    return svg_y / config.svg_height * config.page_height


def svg_width_to_points(svg_width: float, config: SvgToPointsConfig = A4_CONFIG) -> float:
    return svg_width / config.svg_width * config.page_width


def svg_height_to_points(svg_height: float, config: SvgToPointsConfig = A4_CONFIG) -> float:
    return svg_height / config.svg_height * config.page_height


def svg_font_size_to_points(svg_font_size: float, config: SvgToPointsConfig = A4_CONFIG) -> float:
    return svg_font_size / config.svg_width * config.page_width * FONT_SIZE_FACTOR


def svg_position(svg_x: float, svg_y: float, config: SvgToPointsConfig = A4_CONFIG) -> dict[str, float]:
    """绝对定位：{"left", "top"}，top 以页面顶端为原点"""
    return {
        "left": svg_x_to_points(svg_x, config),
        "top": svg_y_to_points(svg_y, config),
    }
