# zakat/aggregation.py
from decimal import Decimal
from typing import Any, Dict, Iterable, List

from django.utils import dateformat, timezone, translation

from .calculator import PaymentKind, to_decimal
from .conf import CHART_CASH_SCALE, COLLECTION_DATE_FORMAT, COLLECTION_DATE_LOCALE


def _get(obj: Any, name: str):
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def collection_date_label(created_at, label_locale: str = COLLECTION_DATE_LOCALE) -> str:
    """Label hari+bulan ("01 Jan"). Tahun sengaja dibuang."""
    if timezone.is_aware(created_at):
        created_at = timezone.localtime(created_at)
    with translation.override(label_locale):
        return dateformat.format(created_at, COLLECTION_DATE_FORMAT)


def aggregate_collections_by_date(payments: Iterable[Any], label_locale: str = COLLECTION_DATE_LOCALE) -> List[Dict[str, Any]]:
    """
    Menjumlahkan pengumpulan per tanggal untuk grafik batang.

    Input diasumsikan sudah terurut naik menurut created_at; urutan output
    mengikuti tanggal yang pertama muncul. Tanggal dari tahun berbeda dengan
    hari+bulan sama akan tergabung (keterbatasan yang diketahui).
    """
    buckets: Dict[str, Dict[str, Decimal]] = {}
    for p in payments:
        label = collection_date_label(_get(p, "created_at"), label_locale)
        bucket = buckets.setdefault(label, {"grain": Decimal("0"), "cash": Decimal("0")})

        if _get(p, "payment_kind") == PaymentKind.GRAIN.value:
            bucket["grain"] += to_decimal(_get(p, "grain_amount") or 0)
        else:
            bucket["cash"] += to_decimal(_get(p, "cash_amount") or 0)

    return [
        {
            "date": label,
            "grain_total": values["grain"],
            "cash_total": values["cash"] / CHART_CASH_SCALE,
        }
        for label, values in buckets.items()
    ]


def aggregate_distribution_by_category(categories: Iterable[Any]) -> List[Dict[str, Any]]:
    return [
        {"name": _get(c, "name"), "value": _get(c, "base_entitlement")}
        for c in categories
    ]


def collection_totals(payments: Iterable[Any]) -> Dict[str, Decimal]:
    # kartu statistik: dijumlah tanpa melihat jenis bayar
    grain = Decimal("0")
    cash = Decimal("0")
    for p in payments:
        grain += to_decimal(_get(p, "grain_amount") or 0)
        cash += to_decimal(_get(p, "cash_amount") or 0)
    return {"grain_total": grain, "cash_total": cash}
