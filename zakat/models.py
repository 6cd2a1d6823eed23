# zakat/models.py
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from .calculator import PAYMENT_KIND_CHOICES, UNIT_CHOICES
from . import conf

# presisi kuantitas beras / nominal uang
DECIMAL_18_2 = {"max_digits": 18, "decimal_places": 2}


class Donor(models.Model):
    name = models.CharField(_("Nama Muzakki"), max_length=150)
    dependents = models.PositiveIntegerField(_("Jumlah Tanggungan"), default=0)
    note = models.CharField(_("Keterangan"), max_length=240, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "muzakki"
        verbose_name = _("Muzakki")
        verbose_name_plural = _("Muzakki")
        ordering = ["name"]

    def __str__(self):
        return self.name


class Category(models.Model):
    name = models.CharField(_("Nama Kategori"), max_length=100, unique=True)
    base_entitlement = models.DecimalField(
        _("Jumlah Hak"),
        validators=[MinValueValidator(0)],
        **DECIMAL_18_2
    )
    # null = data lama tanpa tag satuan; tampilan jatuh ke tebakan
    unit = models.CharField(_("Satuan Hak"), max_length=10, choices=UNIT_CHOICES, blank=True, null=True)
    note = models.CharField(_("Keterangan"), max_length=240, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "kategori_mustahik"
        verbose_name = _("Kategori Mustahik")
        verbose_name_plural = _("Kategori Mustahik")
        ordering = ["name"]

    def __str__(self):
        return self.name


class Payment(models.Model):
    head_of_household = models.CharField(_("Nama Kepala Keluarga"), max_length=150)
    total_dependents = models.PositiveIntegerField(_("Jumlah Tanggungan"), default=0)
    dependents_paid = models.PositiveIntegerField(_("Tanggungan yang Dibayar"), default=0)
    payment_kind = models.CharField(_("Jenis Bayar"), max_length=10, choices=PAYMENT_KIND_CHOICES)
    grain_amount = models.DecimalField(
        _("Bayar Beras (kg)"), null=True, blank=True,
        validators=[MinValueValidator(0)], **DECIMAL_18_2
    )
    cash_amount = models.DecimalField(
        _("Bayar Uang (Rp)"), null=True, blank=True,
        validators=[MinValueValidator(0)], **DECIMAL_18_2
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "bayarzakat"
        verbose_name = _("Pembayaran Zakat")
        verbose_name_plural = _("Pembayaran Zakat")
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["created_at"]),
            models.Index(fields=["payment_kind"]),
        ]

    def __str__(self):
        return f"{self.head_of_household} - {self.get_payment_kind_display()}"


class Recipient(models.Model):
    name = models.CharField(_("Nama"), max_length=150)
    # referensi teks ke Category.name (bukan foreign key)
    category_name = models.CharField(_("Kategori"), max_length=100)
    entitlement = models.DecimalField(_("Hak"), **DECIMAL_18_2)
    entitlement_unit = models.CharField(_("Satuan Hak"), max_length=10, choices=UNIT_CHOICES, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.category_name})"


class ResidentRecipient(Recipient):
    class Meta(Recipient.Meta):
        db_table = "mustahik_warga"
        verbose_name = _("Mustahik Warga")
        verbose_name_plural = _("Mustahik Warga")


class OtherRecipient(Recipient):
    class Meta(Recipient.Meta):
        db_table = "mustahik_lainnya"
        verbose_name = _("Mustahik Lainnya")
        verbose_name_plural = _("Mustahik Lainnya")


class ZakatSetting(models.Model):
    """Satu baris saja (pk=1): kurs dan tarif yang dipakai saat input dan tampilan."""
    exchange_rate = models.DecimalField(
        _("Kurs Beras (Rp/kg)"), default=conf.EXCHANGE_RATE,
        validators=[MinValueValidator(0)], **DECIMAL_18_2
    )
    grain_per_head = models.DecimalField(
        _("Beras per Jiwa (kg)"), default=conf.GRAIN_PER_HEAD,
        validators=[MinValueValidator(0)], **DECIMAL_18_2
    )
    cash_per_head = models.DecimalField(
        _("Uang per Jiwa (Rp)"), default=conf.CASH_PER_HEAD,
        validators=[MinValueValidator(0)], **DECIMAL_18_2
    )
    cash_threshold = models.DecimalField(
        _("Ambang Nilai Uang"), default=conf.CASH_THRESHOLD,
        validators=[MinValueValidator(0)], **DECIMAL_18_2
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Pengaturan Zakat")
        verbose_name_plural = _("Pengaturan Zakat")

    def __str__(self):
        return f"1 kg = Rp {self.exchange_rate}"
