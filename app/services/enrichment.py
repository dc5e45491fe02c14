# app/services/enrichment.py
"""
Join stored cart lines with live product data.

Lookups run concurrently, one per line, and all of them settle before the
result is returned. A failed lookup turns into a placeholder line; it never
cancels the other lookups or fails the batch. Output order equals input order.
"""
import asyncio
import logging
from typing import List, Sequence

import httpx

from app.core.errors import ProductLookupError
from app.models.cart import CartLine, EnrichedCartLine
from app.models.product import ProductView
from app.services.product_client import ProductClient

logger = logging.getLogger(__name__)


def placeholder_line(line: CartLine, image: str) -> EnrichedCartLine:
    return EnrichedCartLine(
        product_id=line.product_id,
        quantity=line.quantity,
        name="Product",
        description="",
        price=0.0,
        image=image,
        stock=0,
    )


async def _enrich_one(products: ProductClient, client: httpx.AsyncClient, line: CartLine) -> EnrichedCartLine:
    placeholder_image = products.placeholder_image
    try:
        payload = await products.fetch_product(client, line.product_id)
        view = ProductView.from_payload(payload, placeholder_image)
    except (ProductLookupError, ValueError) as e:
        logger.warning("Using placeholder for product %s: %s", line.product_id, e)
        return placeholder_line(line, placeholder_image)
    except Exception:
        logger.exception("Unexpected error enriching product %s", line.product_id)
        return placeholder_line(line, placeholder_image)
    return EnrichedCartLine(
        product_id=line.product_id,
        quantity=line.quantity,
        name=view.name,
        description=view.description,
        price=view.price,
        image=view.image or placeholder_image,
        stock=view.stock,
    )


async def enrich_items(lines: Sequence[CartLine], products: ProductClient) -> List[EnrichedCartLine]:
    if not lines:
        return []
    async with products.session() as client:
        # gather keeps argument order regardless of completion order
        return list(await asyncio.gather(*(_enrich_one(products, client, line) for line in lines)))
