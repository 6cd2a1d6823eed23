from decimal import Decimal

import pytest

from zakat.calculator import (
    CategoryRef,
    PaymentKind,
    Unit,
    apply_payment_split,
    compute_entitlement,
    format_entitlement,
    infer_unit,
    resolve_unit,
)

RATE = Decimal("15000")
FAKIR = CategoryRef(base_entitlement=Decimal("2.5"))


# --- compute_entitlement ---


@pytest.mark.parametrize("base", ["0", "0.5", "2.5", "3", "1000"])
@pytest.mark.parametrize("rate", ["1", "2", "15000"])
def test_compute_entitlement_weight_is_identity_and_cash_multiplies(base, rate):
    b, r = Decimal(base), Decimal(rate)
    assert compute_entitlement(b, Unit.WEIGHT, r) == b
    assert compute_entitlement(b, Unit.CASH, r) == b * r


def test_compute_entitlement_fakir_scenario():
    assert compute_entitlement(Decimal("2.5"), Unit.WEIGHT, RATE) == Decimal("2.5")
    assert compute_entitlement(Decimal("2.5"), Unit.CASH, RATE) == Decimal("37500")


def test_compute_entitlement_accepts_plain_numbers_and_unit_values():
    assert compute_entitlement(2.5, "uang", 15000) == Decimal("37500")
    assert compute_entitlement(3, "beras", 15000) == Decimal("3")


# --- infer_unit ---


def test_infer_unit_matches_cash_conversion_of_category():
    assert infer_unit(Decimal("37500"), FAKIR, RATE) is Unit.CASH


def test_infer_unit_matches_category_weight():
    assert infer_unit(Decimal("2.5"), FAKIR, RATE) is Unit.WEIGHT


def test_infer_unit_without_category_uses_threshold():
    assert infer_unit(5000, None, RATE, cash_threshold=1000) is Unit.CASH
    assert infer_unit(999, None, RATE, cash_threshold=1000) is Unit.WEIGHT
    assert infer_unit(1000, None, RATE, cash_threshold=1000) is Unit.CASH


def test_infer_unit_explicit_category_tag_wins():
    tagged_cash = CategoryRef(base_entitlement=Decimal("2.5"), unit="uang")
    tagged_weight = CategoryRef(base_entitlement=Decimal("2.5"), unit=Unit.WEIGHT)
    assert infer_unit(Decimal("2.5"), tagged_cash, RATE) is Unit.CASH
    assert infer_unit(Decimal("37500"), tagged_weight, RATE) is Unit.WEIGHT


def test_infer_unit_unmatched_value_falls_back_to_threshold():
    # tidak cocok dengan hak kategori dalam kg maupun rupiah
    assert infer_unit(Decimal("3"), FAKIR, RATE) is Unit.WEIGHT
    assert infer_unit(Decimal("20000"), FAKIR, RATE) is Unit.CASH


def test_infer_unit_rate_of_one_is_weight():
    assert infer_unit(Decimal("2.5"), FAKIR, Decimal("1")) is Unit.WEIGHT


def test_infer_unit_accepts_mapping_category():
    assert infer_unit(37500, {"base_entitlement": 2.5}, 15000) is Unit.CASH
    assert infer_unit(2.5, {"base_entitlement": 2.5}, 15000) is Unit.WEIGHT


def test_infer_unit_ignores_unknown_tag_values():
    odd = CategoryRef(base_entitlement=Decimal("2.5"), unit="liter")
    assert infer_unit(Decimal("37500"), odd, RATE) is Unit.CASH


def test_infer_unit_misreads_large_weights_as_cash():
    # keterbatasan heuristik: 1500 kg tanpa konteks terbaca sebagai rupiah
    assert infer_unit(Decimal("1500"), None, RATE) is Unit.CASH


@pytest.mark.parametrize("base", ["0.5", "1", "2.5", "10", "3000"])
@pytest.mark.parametrize("rate", ["2", "15000"])
def test_infer_unit_recovers_cash_from_computed_entitlement(base, rate):
    b, r = Decimal(base), Decimal(rate)
    value = compute_entitlement(b, Unit.CASH, r)
    assert infer_unit(value, CategoryRef(b), r) is Unit.CASH


# --- resolve_unit ---


def test_resolve_unit_prefers_record_tag():
    assert resolve_unit(Decimal("37500"), "beras", FAKIR, RATE) is Unit.WEIGHT
    assert resolve_unit(Decimal("2.5"), Unit.CASH, FAKIR, RATE) is Unit.CASH


def test_resolve_unit_untagged_record_is_inferred():
    assert resolve_unit(Decimal("37500"), None, FAKIR, RATE) is Unit.CASH
    assert resolve_unit(Decimal("2.5"), "", FAKIR, RATE) is Unit.WEIGHT


# --- format_entitlement ---


def test_format_weight():
    assert format_entitlement(Decimal("2.5"), Unit.WEIGHT) == "2.5 kg"
    assert format_entitlement(Decimal("2.00"), Unit.WEIGHT) == "2 kg"
    assert format_entitlement(Decimal("2.55"), Unit.WEIGHT) == "2.6 kg"
    assert format_entitlement(10, "beras") == "10 kg"


def test_format_cash():
    assert format_entitlement(Decimal("37500"), Unit.CASH) == "Rp 37.500"
    assert format_entitlement(Decimal("1234567.5"), Unit.CASH) == "Rp 1.234.568"
    assert format_entitlement(Decimal("999"), Unit.CASH) == "Rp 999"
    assert format_entitlement(0, Unit.CASH) == "Rp 0"


def test_format_missing_value():
    assert format_entitlement(None, Unit.CASH) == "-"
    assert format_entitlement(None, Unit.WEIGHT) == "-"


# --- apply_payment_split ---


def test_payment_split_grain():
    split = apply_payment_split(PaymentKind.GRAIN, Decimal("2.5"), Decimal("45000"), 3)
    assert split.grain_amount == Decimal("7.5")
    assert split.cash_amount is None


def test_payment_split_cash():
    split = apply_payment_split("uang", Decimal("2.5"), Decimal("45000"), 3)
    assert split.grain_amount is None
    assert split.cash_amount == Decimal("135000")


@pytest.mark.parametrize("kind", list(PaymentKind))
@pytest.mark.parametrize("heads", [0, 1, 4])
def test_payment_split_sets_exactly_one_amount(kind, heads):
    split = apply_payment_split(kind, Decimal("2.5"), Decimal("45000"), heads)
    filled = [v for v in split if v is not None]
    assert len(filled) == 1
    if kind is PaymentKind.GRAIN:
        assert split.grain_amount is not None
    else:
        assert split.cash_amount is not None


def test_payment_split_tolerates_invalid_counts():
    split = apply_payment_split(PaymentKind.GRAIN, Decimal("2.5"), Decimal("45000"), -1)
    assert split.grain_amount == Decimal("-2.5")
