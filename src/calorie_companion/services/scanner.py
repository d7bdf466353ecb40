"""Barcode scan controller with guaranteed camera release."""

import asyncio
import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from calorie_companion.domain.errors import CalorieCompanionError, CameraUnavailable
from calorie_companion.domain.scanner import BarcodeDetection, ScanState

_logger = logging.getLogger(__name__)

REAR_FACING = "environment"


class CameraStream(Protocol):
    """A live camera stream made of one or more tracks."""

    @property
    def active(self) -> bool:
        """Return True while the stream delivers frames."""

    @property
    def active_tracks(self) -> int:
        """Return the number of tracks still holding the device."""

    async def read_frame(self) -> object:
        """Return the current video frame."""

    def stop(self) -> None:
        """Release every track. Must be idempotent."""


class CameraProvider(Protocol):
    """Interface for acquiring camera streams."""

    async def open(self, facing: str = REAR_FACING) -> CameraStream:
        """Open a stream, raising CameraUnavailable on denial or no device."""


class BarcodeDetector(Protocol):
    """Interface for a platform barcode-detection capability."""

    async def detect(self, frame: object) -> list[BarcodeDetection]:
        """Return the barcodes found in the frame."""


@dataclass
class VideoSurface:
    """Renderable surface that the live stream is attached to."""

    stream: CameraStream | None = None
    paused: bool = False

    def attach(self, stream: CameraStream) -> None:
        self.stream = stream
        self.paused = False

    def detach(self) -> None:
        self.stream = None

    @property
    def ready(self) -> bool:
        """Return True when a frame can safely be read."""
        return self.stream is not None and self.stream.active and not self.paused


@dataclass
class BarcodeScanController:
    """Drive the camera and poll the detector until the first barcode.

    States move ``IDLE -> STARTING -> SCANNING`` and then to ``DETECTED``,
    ``ERROR`` (both fall back to ``IDLE`` after cleanup) or ``STOPPED`` when the
    user cancels. The camera is released on every way out of ``SCANNING``.
    """

    camera: CameraProvider
    detector_factory: Callable[[], BarcodeDetector]
    poll_interval_seconds: float = 0.3
    surface: VideoSurface = field(default_factory=VideoSurface)
    state: ScanState = field(default=ScanState.IDLE, init=False)
    last_error: CalorieCompanionError | None = field(default=None, init=False)
    _stream: CameraStream | None = field(default=None, init=False, repr=False)
    _poll_task: "asyncio.Task[None] | None" = field(
        default=None, init=False, repr=False
    )
    _result: "asyncio.Future[str | None] | None" = field(
        default=None, init=False, repr=False
    )
    _generation: int = field(default=0, init=False, repr=False)

    @property
    def active_tracks(self) -> int:
        """Return the number of camera tracks currently held."""
        if self._stream is None:
            return 0
        return self._stream.active_tracks

    @property
    def running(self) -> bool:
        return self.state in {ScanState.STARTING, ScanState.SCANNING}

    async def start(self) -> None:
        """Acquire the camera and begin polling for barcodes."""
        if self.running:
            raise RuntimeError("Scanner is already running")
        self._generation += 1
        generation = self._generation
        self.last_error = None
        self.state = ScanState.STARTING
        try:
            detector = self.detector_factory()
            stream = await self.camera.open(facing=REAR_FACING)
        except CalorieCompanionError as exc:
            if generation == self._generation:
                self._finish_with_error(exc)
            raise
        except Exception as exc:
            _logger.exception("Unexpected error while starting the scanner")
            error = CameraUnavailable()
            if generation == self._generation:
                self._finish_with_error(error)
            raise error from exc
        if generation != self._generation:
            # stop() ran while the camera was being acquired
            stream.stop()
            return

        self._stream = stream
        self.surface.attach(stream)
        self._result = asyncio.get_running_loop().create_future()
        self.state = ScanState.SCANNING
        self._poll_task = asyncio.create_task(self._poll(detector, generation))
        _logger.info("Barcode scanner started")

    def stop(self) -> None:
        """Cancel polling and release the camera. Safe to call repeatedly."""
        self._generation += 1
        task, self._poll_task = self._poll_task, None
        if task is not None and not task.done():
            task.cancel()
        self._release()
        if self.running:
            self.state = ScanState.STOPPED
            _logger.info("Barcode scanner stopped")
        self._resolve(None)

    async def close(self) -> None:
        """Stop the scanner and wait for the poll task to unwind."""
        task = self._poll_task
        self.stop()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def __aenter__(self) -> "BarcodeScanController":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def wait_for_barcode(self) -> str | None:
        """Return the decoded value once; None if the scan was stopped.

        Raises the scan error when the camera failed mid-scan.
        """
        result = self._result
        if result is None:
            return None
        value = await result
        if self._result is result:
            self._result = None
        if value is None and self.last_error is not None:
            raise self.last_error
        return value

    async def _poll(self, detector: BarcodeDetector, generation: int) -> None:
        while self._is_current(generation):
            await asyncio.sleep(self.poll_interval_seconds)
            if not self._is_current(generation) or not self.surface.ready:
                continue
            stream = self._stream
            if stream is None:
                return
            try:
                frame = await stream.read_frame()
            except CameraUnavailable as exc:
                if self._is_current(generation):
                    self._finish_with_error(exc)
                return
            try:
                detections = await detector.detect(frame)
            except Exception:
                _logger.warning("Barcode detection failed", exc_info=True)
                continue
            if not self._is_current(generation):
                return
            if detections:
                self._finish_with_detection(detections[0].raw_value)
                return

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation and self.state is ScanState.SCANNING

    def _finish_with_detection(self, value: str) -> None:
        self._poll_task = None
        self._release()
        self.state = ScanState.DETECTED
        _logger.info("Barcode detected: %s", value)
        self._resolve(value)
        self.state = ScanState.IDLE

    def _finish_with_error(self, exc: CalorieCompanionError) -> None:
        self._poll_task = None
        self._release()
        self.state = ScanState.ERROR
        self.last_error = exc
        _logger.warning("Barcode scanner error: %s", exc)
        self._resolve(None)
        self.state = ScanState.IDLE

    def _release(self) -> None:
        stream, self._stream = self._stream, None
        if stream is not None:
            stream.stop()
        self.surface.detach()

    def _resolve(self, value: str | None) -> None:
        if self._result is not None and not self._result.done():
            self._result.set_result(value)
