import logging
import os

from busy_blocker.models import BlockerConfig
from integration.providers.base import CalendarProvider
from integration.providers.memory_provider import MemoryProvider

logger = logging.getLogger(__name__)


def get_provider(config: BlockerConfig, credentials=None) -> CalendarProvider:
    """
    Build the calendar backend selected by CALENDAR_PROVIDER (google or memory).
    """
    name = os.getenv("CALENDAR_PROVIDER", "google").strip().lower()

    if name == "memory":
        logger.warning("Using in-memory calendar provider; nothing will be written to a real calendar")
        return MemoryProvider()

    if name == "google":
        # imported lazily so the memory provider works without google libraries
        from integration.providers.google_provider import GoogleCalendarProvider

        if credentials is None:
            from storage.google_auth import GoogleAuthStore

            credentials = GoogleAuthStore().get_credentials()
        return GoogleCalendarProvider(credentials=credentials, timezone=config.timezone)

    raise ValueError(f"Unknown CALENDAR_PROVIDER {name!r} (expected 'google' or 'memory')")
