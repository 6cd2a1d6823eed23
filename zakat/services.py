# zakat/services.py
import logging
from datetime import datetime, time, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Tuple

from django.db import transaction
from django.db.models import Q
from django.utils import dateformat, timezone, translation

from .aggregation import (
    aggregate_collections_by_date,
    aggregate_distribution_by_category,
    collection_totals,
)
from .calculator import (
    CategoryRef,
    Unit,
    compute_entitlement,
    format_entitlement,
    infer_unit,
    resolve_unit,
    to_decimal,
)
from .conf import COLLECTION_DATE_LOCALE, ZakatConfig
from .models import Category, Donor, OtherRecipient, Payment, ResidentRecipient, ZakatSetting

logger = logging.getLogger(__name__)

RECIPIENT_MODELS = (ResidentRecipient, OtherRecipient)
REPORT_TITLE = "Laporan Zakat Fitrah"


def _q1(val: Decimal) -> Decimal:
    return (val or Decimal("0")).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


# -------- konfigurasi --------
def _config_from_row(row: ZakatSetting) -> ZakatConfig:
    return ZakatConfig(
        exchange_rate=row.exchange_rate,
        grain_per_head=row.grain_per_head,
        cash_per_head=row.cash_per_head,
        cash_threshold=row.cash_threshold,
    )


def get_zakat_config() -> ZakatConfig:
    row = ZakatSetting.objects.filter(pk=1).first()
    if row is None:
        return ZakatConfig()
    return _config_from_row(row)


@transaction.atomic
def update_zakat_config(**changes) -> ZakatConfig:
    row, created = ZakatSetting.objects.select_for_update().get_or_create(pk=1)
    # field yang tidak dikenal ditolak oleh dataclasses.replace (TypeError)
    config = _config_from_row(row).with_changes(**changes)
    for field in changes:
        setattr(row, field, getattr(config, field))
    row.save()
    logger.info("Zakat settings %s: %s", "created" if created else "updated", sorted(changes))
    return config


# -------- hak & satuan --------
def category_index() -> Dict[str, Category]:
    return {c.name: c for c in Category.objects.all()}


def category_unit(category: Category, config: ZakatConfig) -> Unit:
    # hak kategori tanpa tag: hanya ambang uang yang bisa dipakai
    return resolve_unit(category.base_entitlement, category.unit, None,
                        config.exchange_rate, config.cash_threshold)


def category_weight_base(category: Category, config: ZakatConfig) -> Decimal:
    """Hak dasar kategori dalam kg, apa pun satuan yang tersimpan di kategori."""
    base = to_decimal(category.base_entitlement)
    if category_unit(category, config) is Unit.CASH:
        return base / to_decimal(config.exchange_rate)
    return base


def recipient_unit(recipient, categories: Dict[str, Category], config: ZakatConfig) -> Unit:
    # tag kategori menyatakan satuan hak dasarnya, bukan satuan hak mustahik;
    # yang diteruskan hanya nilai dasar dalam kg tanpa tag
    category = categories.get(recipient.category_name)
    ref = CategoryRef(category_weight_base(category, config)) if category is not None else None
    return resolve_unit(
        recipient.entitlement,
        recipient.entitlement_unit,
        ref,
        config.exchange_rate,
        config.cash_threshold,
    )


def entitlement_for_category(category: Category, unit, config: ZakatConfig) -> Decimal:
    if Unit(unit) is category_unit(category, config):
        value = to_decimal(category.base_entitlement)
    else:
        value = compute_entitlement(category_weight_base(category, config), unit, config.exchange_rate)
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def preview_entitlement(category: Category, unit, config: ZakatConfig) -> Dict[str, Any]:
    value = entitlement_for_category(category, unit, config)
    return {
        "category": category.name,
        "unit": Unit(unit).value,
        "entitlement": str(value),
        "entitlement_display": format_entitlement(value, unit),
    }


# -------- baris tampilan --------
def payment_row(p: Payment) -> Dict[str, Any]:
    return {
        "id": p.id,
        "head_of_household": p.head_of_household,
        "total_dependents": p.total_dependents,
        "dependents_paid": p.dependents_paid,
        "payment_kind": p.payment_kind,
        "grain_display": format_entitlement(p.grain_amount, Unit.WEIGHT),
        "cash_display": format_entitlement(p.cash_amount, Unit.CASH),
        "created_at": p.created_at,
    }


def recipient_row(r, categories: Dict[str, Category], config: ZakatConfig) -> Dict[str, Any]:
    unit = recipient_unit(r, categories, config)
    return {
        "id": r.id,
        "name": r.name,
        "category_name": r.category_name,
        "entitlement": str(r.entitlement),
        "entitlement_unit": unit.value,
        "entitlement_display": format_entitlement(r.entitlement, unit),
    }


# -------- beranda (dashboard) --------
def compute_dashboard() -> Dict[str, Any]:
    config = get_zakat_config()

    # grafik butuh urutan naik menurut waktu
    payments = list(Payment.objects.order_by("created_at", "id"))
    categories = list(Category.objects.order_by("name"))
    totals = collection_totals(payments)

    collection = [
        {
            "date": point["date"],
            "grain_total": str(point["grain_total"]),
            "cash_total": str(point["cash_total"]),
        }
        for point in aggregate_collections_by_date(payments)
    ]
    distribution = [
        {"name": slice_["name"], "value": str(slice_["value"])}
        for slice_ in aggregate_distribution_by_category(categories)
    ]

    return {
        "stats": {
            "total_donors": Donor.objects.count(),
            "total_recipients": sum(m.objects.count() for m in RECIPIENT_MODELS),
            "total_grain": str(totals["grain_total"]),
            "total_grain_display": f"{_q1(totals['grain_total'])} kg",
            "total_cash": str(totals["cash_total"]),
            "total_cash_display": format_entitlement(totals["cash_total"], Unit.CASH),
        },
        "charts": {
            "collection": collection,
            "distribution": distribution,
        },
        "config": config.as_dict(),
    }


# -------- laporan --------
def report_window(filter_type: str, start_date=None, end_date=None) -> Tuple[Optional[datetime], Optional[datetime]]:
    """Batas tanggal (inklusif) untuk filter laporan; none -> tanpa filter."""
    tz = timezone.get_current_timezone()
    today = timezone.localdate()

    def day_start(d):
        return timezone.make_aware(datetime.combine(d, time.min), tz)

    def day_end(d):
        return timezone.make_aware(datetime.combine(d, time.max), tz)

    days = {"last_1m": 30, "last_3m": 90, "last_6m": 180}.get(filter_type)
    if days:
        return day_start(today - timedelta(days=days)), day_end(today)
    if filter_type == "custom":
        return day_start(start_date), day_end(end_date)
    return None, None


def compute_report(start_dt=None, end_dt=None) -> Dict[str, Any]:
    config = get_zakat_config()
    categories = category_index()

    date_filter = Q()
    if start_dt and end_dt:
        if timezone.is_naive(start_dt):
            start_dt = timezone.make_aware(start_dt, timezone.get_current_timezone())
        if timezone.is_naive(end_dt):
            end_dt = timezone.make_aware(end_dt, timezone.get_current_timezone())
        date_filter = Q(created_at__gte=start_dt, created_at__lte=end_dt)

    payments = list(Payment.objects.filter(date_filter).order_by("created_at", "id"))
    totals = collection_totals(payments)

    with translation.override(COLLECTION_DATE_LOCALE):
        generated_on = dateformat.format(timezone.localtime(), "d F Y")

    sections = {
        model._meta.db_table: [
            recipient_row(r, categories, config)
            for r in model.objects.filter(date_filter).order_by("name")
        ]
        for model in RECIPIENT_MODELS
    }
    logger.info("Report computed: %d payments, filter=%s", len(payments), bool(start_dt and end_dt))

    return {
        "status": "ok",
        "title": REPORT_TITLE,
        "generated_on": generated_on,
        "filter": {
            "enabled": bool(start_dt and end_dt),
            "start": start_dt.isoformat() if start_dt else None,
            "end": end_dt.isoformat() if end_dt else None,
        },
        "totals": {
            "payments": len(payments),
            "grain_total": str(totals["grain_total"]),
            "grain_display": f"{_q1(totals['grain_total'])} kg",
            "cash_total": str(totals["cash_total"]),
            "cash_display": format_entitlement(totals["cash_total"], Unit.CASH),
        },
        "collection": [
            {
                "date": point["date"],
                "grain_total": str(point["grain_total"]),
                "cash_total": str(point["cash_total"]),
            }
            for point in aggregate_collections_by_date(payments)
        ],
        "payments": [payment_row(p) for p in reversed(payments)],
        "recipients": sections,
    }


# -------- migrasi tag satuan --------
def backfill_entitlement_units(dry_run: bool = False) -> Dict[str, Any]:
    """
    Menyimpan satuan hasil tebakan ke record yang belum punya tag satuan.

    Mustahik ditebak lewat recipient_unit: hak dasar kategori dikonversi ke kg
    lebih dulu, jadi tag kategori tidak dipakai sebagai satuan hak mustahik.
    """
    config = get_zakat_config()
    categories = category_index()
    untagged = Q(entitlement_unit__isnull=True) | Q(entitlement_unit="")

    updated: List[Dict[str, Any]] = []
    unknown_category: List[Dict[str, Any]] = []

    @transaction.atomic
    def _do_update():
        for model in RECIPIENT_MODELS:
            table = model._meta.db_table
            for r in model.objects.select_for_update().filter(untagged):
                category = categories.get(r.category_name)
                if category is None:
                    # tetap ditebak dari ambang, tapi dicatat
                    unknown_category.append({"table": table, "id": r.id, "category_name": r.category_name})
                unit = recipient_unit(r, categories, config)
                updated.append({"table": table, "id": r.id, "value": str(r.entitlement), "unit": unit.value})
                if not dry_run:
                    r.entitlement_unit = unit.value
                    r.save(update_fields=["entitlement_unit"])

        for c in Category.objects.select_for_update().filter(Q(unit__isnull=True) | Q(unit="")):
            unit = infer_unit(c.base_entitlement, None, config.exchange_rate, config.cash_threshold)
            updated.append({"table": Category._meta.db_table, "id": c.id,
                            "value": str(c.base_entitlement), "unit": unit.value})
            if not dry_run:
                c.unit = unit.value
                c.save(update_fields=["unit"])

    _do_update()
    logger.info("Entitlement unit backfill: %d records%s", len(updated), " (dry run)" if dry_run else "")

    return {
        "status": "ok",
        "dry_run": dry_run,
        "message": [f"Processed {len(updated)} untagged records"],
        "updated": updated,
        "unknown_category": unknown_category,
    }
