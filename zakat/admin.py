from django.contrib import admin

from .calculator import format_entitlement
from .models import Category, Donor, OtherRecipient, Payment, ResidentRecipient, ZakatSetting
from .services import category_index, category_unit, get_zakat_config, recipient_unit


# ==========================
#  Muzakki
# ==========================
@admin.register(Donor)
class DonorAdmin(admin.ModelAdmin):
    list_display = ("name", "dependents", "note", "created_at")
    search_fields = ("name", "note")
    ordering = ("name",)
    list_per_page = 25


# ==========================
#  Kategori
# ==========================
@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "base_entitlement", "unit", "entitlement_display")
    list_filter = ("unit",)
    search_fields = ("name",)
    ordering = ("name",)
    list_per_page = 25

    def entitlement_display(self, obj):
        return format_entitlement(obj.base_entitlement, category_unit(obj, get_zakat_config()))
    entitlement_display.short_description = "Hak"


# ==========================
#  Bayar zakat
# ==========================
@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "head_of_household",
        "total_dependents",
        "dependents_paid",
        "payment_kind",
        "grain_amount",
        "cash_amount",
        "created_at",
    )
    list_filter = ("payment_kind",)
    search_fields = ("head_of_household",)
    ordering = ("-created_at",)
    list_per_page = 25


# ==========================
#  Mustahik
# ==========================
class RecipientAdmin(admin.ModelAdmin):
    list_display = ("name", "category_name", "entitlement", "entitlement_unit", "entitlement_display")
    list_filter = ("category_name", "entitlement_unit")
    search_fields = ("name", "category_name")
    ordering = ("name",)
    list_per_page = 25

    def get_changelist_instance(self, request):
        cl = super().get_changelist_instance(request)
        # indeks kategori & konfigurasi sekali per halaman, hasilnya ditempel ke tiap baris
        categories = category_index()
        config = get_zakat_config()
        for obj in cl.result_list:
            obj.entitlement_text = format_entitlement(obj.entitlement, recipient_unit(obj, categories, config))
        return cl

    def entitlement_display(self, obj):
        text = getattr(obj, "entitlement_text", None)
        if text is None:
            text = format_entitlement(obj.entitlement, recipient_unit(obj, category_index(), get_zakat_config()))
        return text
    entitlement_display.short_description = "Hak"


admin.site.register(ResidentRecipient, RecipientAdmin)
admin.site.register(OtherRecipient, RecipientAdmin)


@admin.register(ZakatSetting)
class ZakatSettingAdmin(admin.ModelAdmin):
    list_display = ("exchange_rate", "grain_per_head", "cash_per_head", "cash_threshold", "updated_at")
