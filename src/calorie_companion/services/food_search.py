"""Daily food log search flow: text lookup and barcode scanning."""

import asyncio
import logging
from dataclasses import dataclass, field

from calorie_companion.domain.errors import CalorieCompanionError, LookupFailed
from calorie_companion.domain.nutrition import NutritionQueryResult
from calorie_companion.services.nutrition import NutritionLookupService
from calorie_companion.services.scanner import BarcodeScanController

_logger = logging.getLogger(__name__)


@dataclass
class FoodSearchSession:
    """Hold the pending lookup result and the inline error for the food log."""

    nutrition_service: NutritionLookupService
    scanner: BarcodeScanController
    query: str = ""
    result: NutritionQueryResult | None = None
    error: str | None = None
    loading: bool = False
    _scan_task: "asyncio.Task[None] | None" = field(
        default=None, init=False, repr=False
    )

    async def search(self, query: str) -> NutritionQueryResult | None:
        """Look up a query, storing the result or the failure message."""
        if not query.strip():
            self.error = None
            return None
        self.query = query
        self.loading = True
        self.error = None
        self.result = None
        try:
            self.result = await self.nutrition_service.lookup(query)
        except LookupFailed as exc:
            self.error = exc.message
        finally:
            self.loading = False
        return self.result

    async def start_scan(self) -> bool:
        """Start the scanner; return False and keep the error when it can't."""
        self.error = None
        try:
            await self.scanner.start()
        except CalorieCompanionError as exc:
            self.error = exc.message
            return False
        self._scan_task = asyncio.create_task(self._search_scanned_barcode())
        return True

    def stop_scan(self) -> None:
        """Cancel an active scan and release the camera."""
        self.scanner.stop()

    async def wait_for_scan(self) -> None:
        """Wait until the current scan flow (including its lookup) finishes."""
        task = self._scan_task
        if task is not None:
            await task

    def take_result(self) -> NutritionQueryResult | None:
        """Return the pending result and clear it so it is used only once."""
        result, self.result = self.result, None
        if result is not None:
            self.query = ""
        return result

    async def close(self) -> None:
        task, self._scan_task = self._scan_task, None
        await self.scanner.close()
        if task is not None and not task.done():
            task.cancel()

    async def _search_scanned_barcode(self) -> None:
        try:
            barcode = await self.scanner.wait_for_barcode()
        except CalorieCompanionError as exc:
            self.error = exc.message
            return
        if barcode is None:
            return
        _logger.info("Looking up scanned barcode: %s", barcode)
        await self.search(barcode)
