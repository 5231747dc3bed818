# tests/test_product_validator.py

"""Tests for catalog record validation."""

import unittest

from storefront.filters.product_validator import ProductValidator


def _record(product_id=1, title="Widget", price=10.0, rate=4.0, count=20):
    return {
        "id": product_id,
        "title": title,
        "price": price,
        "category": "electronics",
        "rating": {"rate": rate, "count": count},
    }


class TestValidate(unittest.TestCase):
    """ProductValidator.validate behaviour."""

    def test_valid_records_pass(self) -> None:
        products, dropped = ProductValidator.validate(
            [_record(1), _record(2, price=0.0)]
        )
        self.assertEqual([p.id for p in products], [1, 2])
        self.assertEqual(dropped, 0)

    def test_drops_unparseable(self) -> None:
        """Missing fields, bad numbers and non-dict rows are dropped."""
        records = [
            {"id": 1, "title": "No price"},
            _record(2, price="free"),
            "not a record",
            _record(3),
        ]
        products, dropped = ProductValidator.validate(records)
        self.assertEqual([p.id for p in products], [3])
        self.assertEqual(dropped, 3)

    def test_drops_invalid_values(self) -> None:
        """Blank titles and out-of-range numbers are rejected."""
        records = [
            _record(1, title="   "),
            _record(2, price=-1.0),
            _record(3, price=float("nan")),
            _record(4, rate=5.1),
            _record(5, count=-3),
            _record(6),
        ]
        products, dropped = ProductValidator.validate(records)
        self.assertEqual([p.id for p in products], [6])
        self.assertEqual(dropped, 5)

    def test_duplicate_ids_keep_first(self) -> None:
        products, dropped = ProductValidator.validate(
            [_record(1, title="First"), _record(1, title="Second")]
        )
        self.assertEqual([p.title for p in products], ["First"])
        self.assertEqual(dropped, 1)

    def test_empty_input(self) -> None:
        self.assertEqual(ProductValidator.validate([]), ([], 0))

    def test_logs_drop_count(self) -> None:
        with self.assertLogs("storefront.filters", level="INFO") as captured:
            ProductValidator.validate([_record(1, price=-2.0)])
        self.assertIn("dropped 1 invalid", captured.output[0])


if __name__ == "__main__":
    unittest.main()
