# zakat/conf.py
from dataclasses import dataclass, replace
from decimal import Decimal

# Kurs beras -> rupiah (Rp per kg)
EXCHANGE_RATE = Decimal("15000")

# Zakat fitrah per jiwa
GRAIN_PER_HEAD = Decimal("2.5")     # kg
CASH_PER_HEAD = Decimal("45000")    # Rp

# Nilai >= ambang ini dianggap rupiah bila tidak ada petunjuk lain
CASH_THRESHOLD = Decimal("1000")

# Grafik pengumpulan menampilkan uang dalam juta
CHART_CASH_SCALE = Decimal("1000000")

CURRENCY_SYMBOL = "Rp"

# Label tanggal grafik: "01 Jan" (tanpa tahun)
COLLECTION_DATE_FORMAT = "d M"
COLLECTION_DATE_LOCALE = "id"

# Delapan asnaf
DEFAULT_CATEGORIES = [
    "Fakir",
    "Miskin",
    "Amil",
    "Mualaf",
    "Riqab",
    "Gharim",
    "Fisabilillah",
    "Ibnu Sabil",
]


@dataclass(frozen=True)
class ZakatConfig:
    exchange_rate: Decimal = EXCHANGE_RATE
    grain_per_head: Decimal = GRAIN_PER_HEAD
    cash_per_head: Decimal = CASH_PER_HEAD
    cash_threshold: Decimal = CASH_THRESHOLD

    def with_changes(self, **changes) -> "ZakatConfig":
        return replace(self, **{k: Decimal(str(v)) for k, v in changes.items()})

    def as_dict(self):
        return {
            "exchange_rate": str(self.exchange_rate),
            "grain_per_head": str(self.grain_per_head),
            "cash_per_head": str(self.cash_per_head),
            "cash_threshold": str(self.cash_threshold),
        }
