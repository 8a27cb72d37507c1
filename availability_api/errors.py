class AvailabilityError(Exception):
    """Base class for failures outside the resolver itself."""


class CalendarFetchError(AvailabilityError):
    """The booking calendar could not be downloaded or parsed."""
