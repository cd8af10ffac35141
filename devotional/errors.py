"""Error kinds surfaced at the controller boundary."""


class DevotionalPlanError(Exception):
    """Base class for devotional plan errors."""


class DataUnavailable(DevotionalPlanError):
    """The corpus could not be fetched, parsed or had the wrong size."""


class ValidationError(DevotionalPlanError, ValueError):
    """User input for the date range was missing or inconsistent."""


class PresentationBlocked(DevotionalPlanError):
    """The full plan was computed but could not be displayed."""
