"""Barcode detection using OpenCV's built-in barcode module."""

import asyncio
from dataclasses import dataclass

import cv2
import numpy as np

from calorie_companion.domain.errors import UnsupportedCapability
from calorie_companion.domain.scanner import (
    RETAIL_FORMATS,
    BarcodeDetection,
    BarcodeFormat,
)
from calorie_companion.services.scanner import BarcodeDetector

_TYPE_NAMES = {
    "EAN13": BarcodeFormat.EAN_13,
    "UPCA": BarcodeFormat.UPC_A,
    "UPCE": BarcodeFormat.UPC_E,
}


@dataclass
class OpenCVBarcodeDetector(BarcodeDetector):
    """Detector restricted to a fixed set of retail formats."""

    detector: object
    formats: frozenset[BarcodeFormat] = RETAIL_FORMATS

    @classmethod
    def create(
        cls, formats: frozenset[BarcodeFormat] = RETAIL_FORMATS
    ) -> "OpenCVBarcodeDetector":
        """Create a detector or fail when the OpenCV build lacks the module."""
        barcode_module = getattr(cv2, "barcode", None)
        factory = getattr(barcode_module, "BarcodeDetector", None)
        if factory is None:
            raise UnsupportedCapability
        return cls(detector=factory(), formats=formats)

    async def detect(self, frame: np.ndarray) -> list[BarcodeDetection]:
        """Return detections for the frame; empty when nothing was found."""
        ok, values, types, _points = await asyncio.to_thread(
            self.detector.detectAndDecodeWithType, frame
        )
        if not ok:
            return []
        return parse_detections(values, types, self.formats)


def parse_detections(
    values: object, types: object, formats: frozenset[BarcodeFormat]
) -> list[BarcodeDetection]:
    """Pair decoded values with their types and keep the accepted formats."""
    detections: list[BarcodeDetection] = []
    for value, type_name in zip(values or (), types or (), strict=False):
        if not value:
            continue
        barcode_format = _TYPE_NAMES.get(_normalize_type(str(type_name)))
        if barcode_format is None or barcode_format not in formats:
            continue
        detections.append(
            BarcodeDetection(raw_value=str(value), format=barcode_format)
        )
    return detections


def _normalize_type(type_name: str) -> str:
    return type_name.upper().replace("_", "").replace("-", "")
