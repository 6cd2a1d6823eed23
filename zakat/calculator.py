# zakat/calculator.py
"""
Perhitungan hak mustahik dan pembagian pembayaran zakat.

Semua fungsi di sini murni: tidak menyentuh database maupun settings.
Konfigurasi (kurs, tarif per jiwa, ambang uang) selalu dikirim oleh pemanggil.
"""
from collections import namedtuple
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Any, Optional

from django.utils import numberformat

from .conf import CASH_THRESHOLD, CURRENCY_SYMBOL


class Unit(str, Enum):
    WEIGHT = "beras"
    CASH = "uang"


class PaymentKind(str, Enum):
    GRAIN = "beras"
    CASH = "uang"


UNIT_CHOICES = [
    (Unit.WEIGHT.value, "Beras (kg)"),
    (Unit.CASH.value, "Uang (Rp)"),
]

PAYMENT_KIND_CHOICES = [
    (PaymentKind.GRAIN.value, "Beras"),
    (PaymentKind.CASH.value, "Uang"),
]

PaymentSplit = namedtuple("PaymentSplit", ["grain_amount", "cash_amount"])

# Konteks kategori minimal untuk infer_unit (model Category juga memenuhi bentuk ini)
CategoryRef = namedtuple("CategoryRef", ["base_entitlement", "unit"], defaults=[None])


# -------- alat angka --------
def to_decimal(x) -> Decimal:
    return x if isinstance(x, Decimal) else Decimal(str(x))


def _field(obj: Any, name: str):
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _as_unit(value) -> Optional[Unit]:
    if value is None or value == "":
        return None
    if isinstance(value, Unit):
        return value
    try:
        return Unit(value)
    except ValueError:
        return None


# -------- hak (entitlement) --------
def compute_entitlement(base_entitlement, unit, exchange_rate) -> Decimal:
    base = to_decimal(base_entitlement)
    if Unit(unit) is Unit.CASH:
        return base * to_decimal(exchange_rate)
    return base


def infer_unit(stored_value, category, exchange_rate, cash_threshold=CASH_THRESHOLD) -> Unit:
    """
    Menebak satuan dari nilai hak yang tersimpan tanpa tag satuan.

    Urutan aturan (yang pertama cocok menang):
      1. kategori punya tag satuan eksplisit -> pakai itu
      2. kategori diketahui -> bandingkan dengan hak kategori dalam kg dan dalam rupiah,
         lalu jatuh ke ambang uang
      3. kategori tidak diketahui -> hanya ambang uang

    Ini heuristik: nilai >= ambang yang sebenarnya berat beras akan salah terbaca
    sebagai rupiah. Tidak pernah melempar exception.
    """
    value = to_decimal(stored_value)
    threshold = to_decimal(cash_threshold)

    if category is not None:
        tagged = _as_unit(_field(category, "unit"))
        if tagged is not None:
            return tagged

        base = _field(category, "base_entitlement")
        if base is not None:
            as_weight = to_decimal(base)
            as_cash = as_weight * to_decimal(exchange_rate)
            if value == as_cash and as_cash != as_weight:
                return Unit.CASH
            if value == as_weight:
                return Unit.WEIGHT
            if value >= threshold:
                return Unit.CASH
            return Unit.WEIGHT

    return Unit.CASH if value >= threshold else Unit.WEIGHT


def resolve_unit(stored_value, explicit_unit, category, exchange_rate, cash_threshold=CASH_THRESHOLD) -> Unit:
    """Tag satuan pada record menang; tebakan hanya untuk data lama."""
    tagged = _as_unit(explicit_unit)
    if tagged is not None:
        return tagged
    return infer_unit(stored_value, category, exchange_rate, cash_threshold)


def format_entitlement(value, unit, currency_symbol: str = CURRENCY_SYMBOL) -> str:
    if value is None or value == "":
        return "-"
    number = to_decimal(value)

    if Unit(unit) is Unit.CASH:
        rounded = number.quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        text = numberformat.format(
            rounded,
            decimal_sep=",",
            decimal_pos=0,
            grouping=3,
            thousand_sep=".",
            force_grouping=True,
            use_l10n=False,
        )
        return f"{currency_symbol} {text}"

    if number == number.to_integral_value():
        return f"{number.to_integral_value():f} kg"
    return f"{number.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP):f} kg"


# -------- pembayaran --------
def apply_payment_split(payment_kind, grain_per_head, cash_per_head, dependents_paid) -> PaymentSplit:
    heads = to_decimal(dependents_paid)
    if PaymentKind(payment_kind) is PaymentKind.GRAIN:
        return PaymentSplit(to_decimal(grain_per_head) * heads, None)
    return PaymentSplit(None, to_decimal(cash_per_head) * heads)
