from decimal import Decimal

import pytest

from app.core.errors import InvalidAmountError, InvalidParticipantsError, SplitMismatchError
from app.core.events import Expense, SplitShare
from app.core.splits import compute_shares, compute_splits, equal_split, percentage_split


def expense(amount, participants, split_type="equal", shares=None, paid_by="A"):
    return Expense(
        currency="USD",
        amount=amount,
        paid_by=paid_by,
        participants=participants,
        split_type=split_type,
        shares=[SplitShare(member_id=m, value=Decimal(str(v))) for m, v in (shares or [])],
    )


def amounts(shares):
    return [int(s.value) for s in shares]


class TestEqualSplit:

    def test_even_three_way(self):
        splits = compute_splits(expense(3000, ["A", "B", "C"]))
        assert splits == {"A": 2000, "B": -1000, "C": -1000}

    def test_remainder_goes_to_first_participants(self):
        shares = compute_shares(expense(1001, ["A", "B", "C"]))
        assert [s.member_id for s in shares] == ["A", "B", "C"]
        assert amounts(shares) == [334, 334, 333]

    def test_remainder_follows_supplied_order(self):
        shares = compute_shares(expense(1001, ["C", "B", "A"]))
        assert {s.member_id: int(s.value) for s in shares} == {"C": 334, "B": 334, "A": 333}

    @pytest.mark.parametrize("amount,n", [(1, 3), (100, 7), (99999, 13), (5, 5)])
    def test_shares_are_floor_or_floor_plus_one(self, amount, n):
        parts = equal_split(amount, [str(i) for i in range(n)])
        base = amount // n
        assert sum(parts) == amount
        assert set(parts) <= {base, base + 1}
        assert parts.count(base + 1) == amount % n

    def test_payer_not_participating(self):
        splits = compute_splits(expense(1000, ["B", "C"], paid_by="A"))
        assert splits == {"A": 1000, "B": -500, "C": -500}
        assert sum(splits.values()) == 0

    def test_shares_are_ignored(self):
        shares = compute_shares(expense(900, ["A", "B"], shares=[("A", 100)]))
        assert amounts(shares) == [450, 450]


class TestExactSplit:

    def test_exact_shares(self):
        shares = compute_shares(expense(1000, ["A", "B"], "exact", [("A", 300), ("B", 700)]))
        assert amounts(shares) == [300, 700]

    def test_mismatch(self):
        with pytest.raises(SplitMismatchError) as exc:
            compute_shares(expense(1000, ["A", "B"], "exact", [("A", 500), ("B", 499)]))
        assert exc.value.expected == 1000
        assert exc.value.actual == 999

    def test_share_for_non_participant(self):
        with pytest.raises(InvalidParticipantsError):
            compute_shares(expense(1000, ["A", "B"], "exact", [("A", 500), ("Z", 500)]))

    def test_missing_share(self):
        with pytest.raises(InvalidParticipantsError):
            compute_shares(expense(1000, ["A", "B"], "exact", [("A", 1000)]))

    def test_fractional_minor_units(self):
        with pytest.raises(InvalidAmountError):
            compute_shares(expense(1000, ["A", "B"], "exact", [("A", "500.5"), ("B", "499.5")]))

    def test_negative_share(self):
        with pytest.raises(InvalidAmountError):
            compute_shares(expense(1000, ["A", "B"], "exact", [("A", 1100), ("B", -100)]))

    def test_zero_share_allowed(self):
        splits = compute_splits(expense(1000, ["A", "B"], "exact", [("A", 0), ("B", 1000)]))
        assert splits == {"A": 1000, "B": -1000}


class TestPercentageSplit:

    def test_thirds_correct_drift_on_largest(self):
        pct = [Decimal("33.33"), Decimal("33.33"), Decimal("33.34")]
        parts = percentage_split(100, pct)
        assert sum(parts) == 100
        assert parts == [33, 33, 34]

    def test_rounding_up_overshoot_is_taken_back(self):
        # 50% of 1001 rounds up on both halves, one unit too many
        parts = percentage_split(1001, [Decimal("50"), Decimal("50")])
        assert sum(parts) == 1001
        assert parts == [500, 501]

    def test_non_integer_percentages(self):
        shares = compute_shares(
            expense(10000, ["A", "B", "C"], "percentage", [("A", "12.5"), ("B", "37.5"), ("C", "50")])
        )
        assert amounts(shares) == [1250, 3750, 5000]

    def test_tolerance(self):
        parts = percentage_split(1000, [Decimal("33.3333"), Decimal("33.3333"), Decimal("33.3333")])
        assert sum(parts) == 1000

    def test_percentages_not_summing_to_hundred(self):
        with pytest.raises(SplitMismatchError):
            compute_shares(expense(1000, ["A", "B"], "percentage", [("A", 50), ("B", 49)]))


class TestValidation:

    @pytest.mark.parametrize("amount", [0, -100])
    def test_non_positive_amount(self, amount):
        with pytest.raises(InvalidAmountError):
            compute_shares(expense(amount, ["A"]))

    def test_empty_participants(self):
        with pytest.raises(InvalidParticipantsError):
            compute_shares(expense(100, []))

    def test_duplicate_participants(self):
        with pytest.raises(InvalidParticipantsError):
            compute_shares(expense(100, ["A", "A"]))


@pytest.mark.parametrize("split_type,shares", [
    ("equal", None),
    ("exact", [("A", 1), ("B", 2), ("C", 9996)]),
    ("percentage", [("A", "10"), ("B", "45.5"), ("C", "44.5")]),
])
def test_shares_sum_to_amount_and_contributions_net_to_zero(split_type, shares):
    e = expense(9999, ["A", "B", "C"], split_type, shares, paid_by="B")
    assert sum(amounts(compute_shares(e))) == 9999
    assert sum(compute_splits(e).values()) == 0
