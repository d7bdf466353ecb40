"""Camera access through OpenCV video capture."""

import asyncio
import logging
import threading
from dataclasses import dataclass, field

import cv2
import numpy as np

from calorie_companion.domain.errors import CameraUnavailable
from calorie_companion.services.scanner import CameraProvider, CameraStream

_logger = logging.getLogger(__name__)


@dataclass
class OpenCVCameraStream(CameraStream):
    """A live capture device exposed as a single video track.

    ``VideoCapture`` is not thread-safe: reads run in a worker thread and hold
    ``_lock``. A ``stop()`` that arrives mid-read only marks the stream closed,
    and the reader releases the device once its read returns.
    """

    capture: cv2.VideoCapture
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )
    _closed: bool = field(default=False, init=False, repr=False)

    @property
    def active(self) -> bool:
        return not self._closed

    @property
    def active_tracks(self) -> int:
        return 1 if self.active else 0

    async def read_frame(self) -> np.ndarray:
        """Grab the next frame without blocking the event loop."""
        ok, frame = await asyncio.to_thread(self._read)
        if self._closed or not ok or frame is None:
            raise CameraUnavailable("Camera stopped delivering frames.")
        return frame

    def stop(self) -> None:
        """Release the device. Safe to call more than once."""
        self._closed = True
        self._release_if_idle()

    def _read(self) -> tuple[bool, np.ndarray | None]:
        try:
            with self._lock:
                if self._closed:
                    return False, None
                return self.capture.read()
        finally:
            if self._closed:
                self._release_if_idle()

    def _release_if_idle(self) -> None:
        if not self._lock.acquire(blocking=False):
            return
        try:
            if self.capture.isOpened():
                self.capture.release()
        finally:
            self._lock.release()


@dataclass
class OpenCVCamera(CameraProvider):
    """Opens capture devices, preferring the rear-facing index."""

    rear_index: int = 0
    front_index: int | None = None

    async def open(self, facing: str = "environment") -> OpenCVCameraStream:
        """Open the preferred camera, falling back to the other one."""
        for index in self._candidate_indices(facing):
            capture = await asyncio.to_thread(cv2.VideoCapture, index)
            if capture.isOpened():
                _logger.info("Camera opened: index=%s", index)
                return OpenCVCameraStream(capture=capture)
            capture.release()
        raise CameraUnavailable

    def _candidate_indices(self, facing: str) -> list[int]:
        ordered = [self.rear_index, self.front_index]
        if facing == "user":
            ordered.reverse()
        return [index for index in ordered if index is not None]
