"""Domain models for barcode scanning."""

from dataclasses import dataclass
from enum import Enum


class ScanState(Enum):
    """Lifecycle states of the barcode scan controller."""

    IDLE = "idle"
    STARTING = "starting"
    SCANNING = "scanning"
    DETECTED = "detected"
    STOPPED = "stopped"
    ERROR = "error"


class BarcodeFormat(Enum):
    """Retail barcode symbologies accepted by the scanner."""

    EAN_13 = "ean_13"
    UPC_A = "upc_a"
    UPC_E = "upc_e"


RETAIL_FORMATS: frozenset[BarcodeFormat] = frozenset(BarcodeFormat)


@dataclass(frozen=True)
class BarcodeDetection:
    """A single decoded barcode."""

    raw_value: str
    format: BarcodeFormat
