from datetime import datetime, timezone

from marketplace.models.review import Review
from marketplace.services.review_service import latest_per_customer, mean_rating


def _review(review_id, customer_id, rating):
    return Review(
        id=review_id,
        product_id="p1",
        customer_id=customer_id,
        rating=rating,
        date=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )


class TestLatestPerCustomer:
    def test_keeps_first_row_per_customer(self):
        rows = [
            _review("r3", "c1", 5),
            _review("r2", "c2", 3),
            _review("r1", "c1", 1),
        ]

        assert [r.id for r in latest_per_customer(rows)] == ["r3", "r2"]

    def test_empty(self):
        assert latest_per_customer([]) == []


class TestMeanRating:
    def test_empty_is_zero(self):
        assert mean_rating([]) == 0.0

    def test_mean(self):
        rows = [_review("a", "c1", 5), _review("b", "c2", 4), _review("c", "c3", 2)]

        assert mean_rating(rows) == 11 / 3
