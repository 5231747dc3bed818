# storefront/filters/product_validator.py

"""Record validation: drop malformed catalog records before classifying."""

import logging
import math
from typing import Any

from storefront.models.product import Product

logger = logging.getLogger("storefront.filters")


class ProductValidator:
    """Convert raw catalog records to products, dropping invalid ones."""

    @staticmethod
    def validate(
        records: list[dict[str, Any]],
    ) -> tuple[list[Product], int]:
        """Parse records and drop those that cannot be trusted.

        A record is dropped when it is missing an id, title or price,
        has a blank title, a negative or non-finite price, a rating
        outside 0..5 or a negative review count.  Duplicate ids keep
        the first occurrence.

        Returns the valid products and the count of dropped records.
        """
        valid: list[Product] = []
        seen_ids: set[int] = set()
        dropped = 0

        for record in records:
            try:
                product = Product.from_dict(record)
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                logger.debug(
                    "Dropped unparseable record %r: %s",
                    record.get("id") if isinstance(record, dict) else record,
                    exc,
                )
                dropped += 1
                continue

            reason = ProductValidator._rejection_reason(product)
            if reason is None and product.id in seen_ids:
                reason = "duplicate id"
            if reason is not None:
                logger.debug(
                    "Dropped product %d (%s): %s",
                    product.id,
                    product.title,
                    reason,
                )
                dropped += 1
                continue

            seen_ids.add(product.id)
            valid.append(product)

        if dropped:
            logger.info("Validation dropped %d invalid records", dropped)

        return valid, dropped

    @staticmethod
    def _rejection_reason(product: Product) -> str | None:
        if not product.title.strip():
            return "empty title"
        if not math.isfinite(product.price) or product.price < 0:
            return "negative or non-finite price"
        if not 0 <= product.rating.rate <= 5:
            return "rating out of range"
        if product.rating.count < 0:
            return "negative review count"
        return None
