"""
Catalog service layer - bulk product import.
"""
import logging
from typing import Dict, List

from django.db import transaction

from .models import Product

logger = logging.getLogger(__name__)


def import_products(rows: List[Dict]) -> List[Product]:
    """
    Create or overwrite products keyed by ``product_code``.

    All rows are written in one transaction; a failing row leaves the
    catalog unchanged.

    Args:
        rows: Validated product field dicts, each with a ``product_code``

    Returns:
        The saved products, in input order
    """
    saved = []
    created_count = 0

    with transaction.atomic():
        for row in rows:
            fields = dict(row)
            code = fields.pop('product_code')
            product, created = Product.objects.update_or_create(
                product_code=code,
                defaults=fields
            )
            created_count += int(created)
            saved.append(product)

    logger.info(
        f"Imported {len(saved)} products: {created_count} created, "
        f"{len(saved) - created_count} updated"
    )
    return saved
