"""Error taxonomy for user-facing failures."""


class CalorieCompanionError(Exception):
    """Base error carrying a message that is safe to show to the user."""

    default_message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        """Return the user-facing message."""
        return str(self)


class CameraUnavailable(CalorieCompanionError):
    """Camera permission was denied, no camera exists, or the feed was lost."""

    default_message = (
        "Could not access camera. Please grant permission and check that "
        "a camera is connected."
    )


class UnsupportedCapability(CalorieCompanionError):
    """The host has no barcode-detection capability."""

    default_message = "Barcode scanner is not supported on this device."


class LookupFailed(CalorieCompanionError):
    """Nutrition lookup failed for any network, parsing or schema reason."""

    default_message = "Could not fetch nutritional data. Please try again."


class MotivationUnavailable(CalorieCompanionError):
    """Motivational message could not be generated. Always absorbed locally."""

    default_message = "Motivational message unavailable."
