import requests

from ..errors import CalendarFetchError

USER_AGENT = "holiday-let-availability/1.0"


def fetch_calendar(url: str, timeout: float) -> bytes:
    """Download the raw iCal feed."""
    if not url:
        raise CalendarFetchError("No calendar URL configured")

    try:
        response = requests.get(url, timeout=timeout, headers={"User-Agent": USER_AGENT})
        response.raise_for_status()
    except requests.RequestException as e:
        raise CalendarFetchError(f"Calendar fetch failed: {e}") from e

    return response.content
