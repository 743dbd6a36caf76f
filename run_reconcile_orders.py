"""
脚本：直接从 WooCommerce 与 WordPress 拉取同一页订单，按 ID 合并并输出汇总。
可选 -o 将合并结果写入 JSON 文件，便于核对两边数据。

运行：python run_reconcile_orders.py [-p 页码] [-s 每页数量] [-o 输出文件]
依赖：.env 中配置 WOOCOMMERCE_STORE_URL、WooCommerce consumer key/secret、WordPress 账号
"""
import argparse
import asyncio
import json
import sys
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

load_dotenv(Path(__file__).resolve().parent / ".env")
sys.path.insert(0, str(Path(__file__).resolve().parent))


async def run_once(page: int, per_page: int, output: Path | None = None):
    from orderhub.order_utils import compute_order_stats, merge_orders, total_pages
    from orderhub.services.content_service import ContentService
    from orderhub.services.storefront_service import StorefrontService

    woo = await StorefrontService().get_orders(page=str(page), per_page=str(per_page))
    woo_orders = woo["orders"]
    logger.info(f"WooCommerce: 拉取到 {len(woo_orders)} 条订单（上游总数 {woo['total']}）")

    response = await ContentService().get_orders(page=str(page), per_page=str(per_page))
    response.raise_for_status()
    wp_payload = response.json()
    wp_orders = wp_payload.get("orders", []) if isinstance(wp_payload, dict) else []
    logger.info(f"WordPress: 拉取到 {len(wp_orders)} 条订单")

    merged = merge_orders(woo_orders, wp_orders)
    by_source: dict[str, int] = {}
    for order in merged:
        by_source[order.source] = by_source.get(order.source, 0) + 1
    logger.info(f"合并后 {len(merged)} 条，总页数 {total_pages(len(merged), per_page)}")
    logger.info(f"来源分布: {by_source}")

    stats = compute_order_stats(merged)
    logger.info(f"状态分布: {stats.statusCounts}")
    logger.info(f"已完成订单收入: {stats.totalRevenue}")

    if output:
        output.write_text(
            json.dumps([o.model_dump(mode="json") for o in merged], indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        logger.info(f"合并结果已写入 {output}")


def parse_args():
    p = argparse.ArgumentParser(description="合并 WooCommerce 与 WordPress 订单并输出汇总")
    p.add_argument("-p", "--page", type=int, default=1, help="页码，默认 1")
    p.add_argument("-s", "--per-page", type=int, default=20, help="每页数量，默认 20")
    p.add_argument("-o", "--output", type=Path, default=None, metavar="FILE", help="合并结果 JSON 输出路径")
    return p.parse_args()


if __name__ == "__main__":
    args = parse_args()
    try:
        asyncio.run(run_once(args.page, args.per_page, args.output))
    except Exception:
        logger.exception("订单合并失败")
        sys.exit(1)
