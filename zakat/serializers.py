# zakat/serializers.py
from decimal import Decimal

from rest_framework import serializers

from .calculator import (
    PAYMENT_KIND_CHOICES,
    UNIT_CHOICES,
    PaymentKind,
    Unit,
    apply_payment_split,
    format_entitlement,
)
from .models import Category, Donor, OtherRecipient, Payment, ResidentRecipient, ZakatSetting
from .services import (
    category_index,
    category_unit,
    entitlement_for_category,
    get_zakat_config,
    recipient_unit,
)

REPORT_FILTER_CHOICES = ["none", "last_1m", "last_3m", "last_6m", "custom"]


class ConfigContextMixin:
    """Konfigurasi & indeks kategori diambil sekali per request lewat context."""

    def _config(self):
        if "config" not in self.context:
            self.context["config"] = get_zakat_config()
        return self.context["config"]

    def _categories(self):
        if "categories" not in self.context:
            self.context["categories"] = category_index()
        return self.context["categories"]


# --------------------------
# Muzakki
# --------------------------
class DonorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Donor
        fields = ["id", "name", "dependents", "note", "created_at"]
        read_only_fields = ["id", "created_at"]


# --------------------------
# Kategori mustahik
# --------------------------
class CategorySerializer(ConfigContextMixin, serializers.ModelSerializer):
    base_entitlement = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=Decimal("0"))
    base_entitlement_display = serializers.SerializerMethodField()
    unit_resolved = serializers.SerializerMethodField()

    class Meta:
        model = Category
        fields = [
            "id", "name", "base_entitlement", "unit", "note",
            "base_entitlement_display", "unit_resolved", "created_at",
        ]
        read_only_fields = ["id", "created_at"]

    def get_unit_resolved(self, obj):
        return category_unit(obj, self._config()).value

    def get_base_entitlement_display(self, obj):
        return format_entitlement(obj.base_entitlement, category_unit(obj, self._config()))


# --------------------------
# Bayar zakat
# --------------------------
class PaymentSerializer(ConfigContextMixin, serializers.ModelSerializer):
    payment_kind = serializers.ChoiceField(choices=PAYMENT_KIND_CHOICES)
    grain_amount = serializers.DecimalField(
        max_digits=18, decimal_places=2, min_value=Decimal("0"), required=False, allow_null=True
    )
    cash_amount = serializers.DecimalField(
        max_digits=18, decimal_places=2, min_value=Decimal("0"), required=False, allow_null=True
    )

    class Meta:
        model = Payment
        fields = [
            "id", "head_of_household", "total_dependents", "dependents_paid",
            "payment_kind", "grain_amount", "cash_amount", "created_at",
        ]
        read_only_fields = ["id", "created_at"]

    def _current(self, attrs, field):
        if field in attrs:
            return attrs[field]
        return getattr(self.instance, field, None)

    def validate(self, attrs):
        kind = PaymentKind(self._current(attrs, "payment_kind"))
        total = self._current(attrs, "total_dependents") or 0
        paid = self._current(attrs, "dependents_paid") or 0

        if paid > total:
            raise serializers.ValidationError(
                {"dependents_paid": "Tanggungan yang dibayar tidak boleh melebihi jumlah tanggungan."}
            )

        amount_field = "grain_amount" if kind is PaymentKind.GRAIN else "cash_amount"
        other_field = "cash_amount" if kind is PaymentKind.GRAIN else "grain_amount"

        amount = attrs.get(amount_field)
        if amount is None:
            keep_stored = (
                self.instance is not None
                and self.instance.payment_kind == kind.value
                and "dependents_paid" not in attrs
                and getattr(self.instance, amount_field) is not None
            )
            if keep_stored:
                amount = getattr(self.instance, amount_field)
            else:
                config = self._config()
                split = apply_payment_split(kind, config.grain_per_head, config.cash_per_head, paid)
                amount = split.grain_amount if kind is PaymentKind.GRAIN else split.cash_amount

        # hanya satu jenis bayar yang terisi
        attrs["payment_kind"] = kind.value
        attrs[amount_field] = amount
        attrs[other_field] = None
        return attrs


# --------------------------
# Mustahik (warga / lainnya)
# --------------------------
class RecipientSerializer(ConfigContextMixin, serializers.ModelSerializer):
    entitlement = serializers.DecimalField(max_digits=18, decimal_places=2, required=False)
    entitlement_unit = serializers.ChoiceField(choices=UNIT_CHOICES, required=False, allow_null=True)
    entitlement_display = serializers.SerializerMethodField()
    entitlement_unit_resolved = serializers.SerializerMethodField()

    class Meta:
        fields = [
            "id", "name", "category_name", "entitlement", "entitlement_unit",
            "entitlement_display", "entitlement_unit_resolved", "created_at",
        ]
        read_only_fields = ["id", "created_at"]

    def get_entitlement_unit_resolved(self, obj):
        return recipient_unit(obj, self._categories(), self._config()).value

    def get_entitlement_display(self, obj):
        unit = recipient_unit(obj, self._categories(), self._config())
        return format_entitlement(obj.entitlement, unit)

    def validate(self, attrs):
        if "entitlement" in attrs and attrs["entitlement"] is not None:
            return attrs

        # hak dihitung ulang bila kategori atau satuan berubah (atau record baru)
        needs_compute = (
            self.instance is None
            or "category_name" in attrs
            or "entitlement_unit" in attrs
        )
        if not needs_compute:
            return attrs

        category_name = attrs.get("category_name", getattr(self.instance, "category_name", None))
        category = self._categories().get(category_name)
        if category is None:
            raise serializers.ValidationError(
                {"category_name": "Kategori tidak ditemukan; isi hak secara manual atau pilih kategori yang ada."}
            )

        unit = attrs.get("entitlement_unit") or getattr(self.instance, "entitlement_unit", None) or Unit.WEIGHT.value
        attrs["entitlement_unit"] = unit
        attrs["entitlement"] = entitlement_for_category(category, unit, self._config())
        return attrs


class ResidentRecipientSerializer(RecipientSerializer):
    class Meta(RecipientSerializer.Meta):
        model = ResidentRecipient


class OtherRecipientSerializer(RecipientSerializer):
    class Meta(RecipientSerializer.Meta):
        model = OtherRecipient


# --------------------------
# Pratinjau hak & pengaturan
# --------------------------
class EntitlementPreviewSerializer(serializers.Serializer):
    category_name = serializers.CharField(max_length=100)
    unit = serializers.ChoiceField(choices=UNIT_CHOICES, default=Unit.WEIGHT.value)

    def validate_category_name(self, value):
        if not Category.objects.filter(name=value).exists():
            raise serializers.ValidationError("Kategori tidak ditemukan.")
        return value


class ZakatSettingSerializer(serializers.ModelSerializer):
    exchange_rate = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=Decimal("0.01"))
    grain_per_head = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=Decimal("0"))
    cash_per_head = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=Decimal("0"))
    cash_threshold = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=Decimal("0"))

    class Meta:
        model = ZakatSetting
        fields = ["exchange_rate", "grain_per_head", "cash_per_head", "cash_threshold"]


class ReportsInputSerializer(serializers.Serializer):
    filter = serializers.ChoiceField(choices=REPORT_FILTER_CHOICES, default="none")
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        if attrs.get("filter") == "custom":
            start, end = attrs.get("start_date"), attrs.get("end_date")
            if not start or not end:
                raise serializers.ValidationError("Filter custom membutuhkan start_date dan end_date.")
            if start > end:
                raise serializers.ValidationError("start_date harus sebelum end_date.")
        return attrs
