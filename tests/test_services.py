from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from zakat.aggregation import collection_date_label
from zakat.calculator import Unit
from zakat.conf import ZakatConfig
from zakat.models import Category, Donor, OtherRecipient, Payment, ResidentRecipient
from zakat.services import (
    backfill_entitlement_units,
    category_index,
    compute_dashboard,
    compute_report,
    entitlement_for_category,
    get_zakat_config,
    recipient_unit,
    report_window,
    update_zakat_config,
)

pytestmark = pytest.mark.django_db


@pytest.fixture
def fakir():
    return Category.objects.create(name="Fakir", base_entitlement=Decimal("2.5"))


def test_config_defaults_without_settings_row():
    assert get_zakat_config() == ZakatConfig()


def test_update_config_persists_changes():
    config = update_zakat_config(exchange_rate=Decimal("16000"))
    assert config.exchange_rate == Decimal("16000")
    assert config.grain_per_head == Decimal("2.5")
    assert get_zakat_config().exchange_rate == Decimal("16000")


def test_recipient_unit_uses_category_context(fakir):
    cash = ResidentRecipient.objects.create(name="Ahmad", category_name="Fakir", entitlement=Decimal("37500"))
    grain = ResidentRecipient.objects.create(name="Budi", category_name="Fakir", entitlement=Decimal("2.5"))
    tagged = OtherRecipient.objects.create(
        name="Citra", category_name="Fakir", entitlement=Decimal("37500"), entitlement_unit="beras"
    )
    categories = category_index()
    config = get_zakat_config()
    assert recipient_unit(cash, categories, config) is Unit.CASH
    assert recipient_unit(grain, categories, config) is Unit.WEIGHT
    assert recipient_unit(tagged, categories, config) is Unit.WEIGHT


def test_category_tag_only_describes_its_base(fakir):
    fakir.unit = "beras"
    fakir.save()
    Category.objects.create(name="Amil", base_entitlement=Decimal("45000"), unit="uang")
    categories = category_index()
    config = get_zakat_config()

    legacy_cash = ResidentRecipient(name="Ahmad", category_name="Fakir", entitlement=Decimal("37500"))
    amil_grain = ResidentRecipient(name="Budi", category_name="Amil", entitlement=Decimal("3"))
    amil_cash = ResidentRecipient(name="Citra", category_name="Amil", entitlement=Decimal("45000"))

    assert recipient_unit(legacy_cash, categories, config) is Unit.CASH
    assert recipient_unit(amil_grain, categories, config) is Unit.WEIGHT
    assert recipient_unit(amil_cash, categories, config) is Unit.CASH


def test_entitlement_for_cash_category(fakir):
    amil = Category.objects.create(name="Amil", base_entitlement=Decimal("45000"), unit="uang")
    config = get_zakat_config()

    assert entitlement_for_category(amil, "uang", config) == Decimal("45000")
    assert entitlement_for_category(amil, "beras", config) == Decimal("3")
    assert entitlement_for_category(fakir, "uang", config) == Decimal("37500")
    assert entitlement_for_category(fakir, "beras", config) == Decimal("2.5")


def test_update_config_rejects_unknown_field():
    with pytest.raises(TypeError):
        update_zakat_config(kurs=Decimal("1"))
    assert get_zakat_config() == ZakatConfig()


def test_dashboard_counts_and_charts(fakir):
    Category.objects.create(name="Miskin", base_entitlement=Decimal("3"))
    Donor.objects.create(name="Hasan", dependents=4)
    Donor.objects.create(name="Husein", dependents=2)
    ResidentRecipient.objects.create(name="Ahmad", category_name="Fakir", entitlement=Decimal("2.5"))
    OtherRecipient.objects.create(name="Budi", category_name="Miskin", entitlement=Decimal("3"))
    Payment.objects.create(head_of_household="Hasan", total_dependents=4, dependents_paid=4,
                           payment_kind="beras", grain_amount=Decimal("10"))
    Payment.objects.create(head_of_household="Husein", total_dependents=2, dependents_paid=2,
                           payment_kind="uang", cash_amount=Decimal("90000"))

    data = compute_dashboard()

    assert data["stats"]["total_donors"] == 2
    assert data["stats"]["total_recipients"] == 2
    assert data["stats"]["total_grain_display"] == "10.0 kg"
    assert data["stats"]["total_cash_display"] == "Rp 90.000"
    assert data["charts"]["collection"] == [
        {"date": collection_date_label(timezone.now()), "grain_total": "10.00", "cash_total": "0.09"},
    ]
    assert data["charts"]["distribution"] == [
        {"name": "Fakir", "value": "2.50"},
        {"name": "Miskin", "value": "3.00"},
    ]
    assert data["config"]["exchange_rate"] == "15000"


def test_dashboard_on_empty_store():
    data = compute_dashboard()
    assert data["stats"]["total_donors"] == 0
    assert data["charts"] == {"collection": [], "distribution": []}


def test_report_window_presets():
    start, end = report_window("last_1m")
    assert (end - start).days == 30
    assert report_window("none") == (None, None)


def test_report_filters_by_period(fakir):
    recent = Payment.objects.create(head_of_household="Baru", total_dependents=1, dependents_paid=1,
                                    payment_kind="beras", grain_amount=Decimal("2.5"))
    old = Payment.objects.create(head_of_household="Lama", total_dependents=1, dependents_paid=1,
                                 payment_kind="uang", cash_amount=Decimal("45000"))
    Payment.objects.filter(pk=old.pk).update(created_at=timezone.now() - timedelta(days=100))
    ResidentRecipient.objects.create(name="Ahmad", category_name="Fakir", entitlement=Decimal("37500"))

    start, end = report_window("last_1m")
    report = compute_report(start_dt=start, end_dt=end)

    assert report["filter"]["enabled"] is True
    assert report["totals"]["payments"] == 1
    assert [p["id"] for p in report["payments"]] == [recent.id]
    assert report["totals"]["grain_display"] == "2.5 kg"
    assert report["recipients"]["mustahik_warga"][0]["entitlement_display"] == "Rp 37.500"
    assert report["recipients"]["mustahik_lainnya"] == []

    unfiltered = compute_report()
    assert unfiltered["totals"]["payments"] == 2
    assert unfiltered["totals"]["cash_display"] == "Rp 45.000"


def test_backfill_tags_untagged_records(fakir):
    cash = ResidentRecipient.objects.create(name="Ahmad", category_name="Fakir", entitlement=Decimal("37500"))
    grain = OtherRecipient.objects.create(name="Budi", category_name="Fakir", entitlement=Decimal("2.5"))
    orphan = OtherRecipient.objects.create(name="Citra", category_name="Dihapus", entitlement=Decimal("5000"))
    tagged = ResidentRecipient.objects.create(
        name="Dedi", category_name="Fakir", entitlement=Decimal("37500"), entitlement_unit="beras"
    )

    result = backfill_entitlement_units()

    assert result["status"] == "ok"
    cash.refresh_from_db()
    grain.refresh_from_db()
    orphan.refresh_from_db()
    tagged.refresh_from_db()
    fakir.refresh_from_db()
    assert cash.entitlement_unit == "uang"
    assert grain.entitlement_unit == "beras"
    assert orphan.entitlement_unit == "uang"
    assert tagged.entitlement_unit == "beras"
    assert fakir.unit == "beras"
    assert result["unknown_category"] == [
        {"table": "mustahik_lainnya", "id": orphan.id, "category_name": "Dihapus"},
    ]
    assert len(result["updated"]) == 4


def test_backfill_dry_run_saves_nothing(fakir):
    r = ResidentRecipient.objects.create(name="Ahmad", category_name="Fakir", entitlement=Decimal("37500"))

    result = backfill_entitlement_units(dry_run=True)

    r.refresh_from_db()
    fakir.refresh_from_db()
    assert result["dry_run"] is True
    assert {row["unit"] for row in result["updated"]} == {"uang", "beras"}
    assert r.entitlement_unit is None
    assert fakir.unit is None
