"""Calendar feed configuration and the built-in fixture provider."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

from .models import CalEvent

logger = logging.getLogger(__name__)

FAKE_PROVIDER = "Fake"


@dataclass(slots=True)
class CalendarConfig:
    """Settings read from the ``Calendar`` node of ``appsettings.json``."""

    provider: str = "Graph"
    client_id: str = ""
    tenant_id: str = "common"
    redirect_uri: str = "http://localhost"
    time_zone_id: str = ""

    @property
    def is_fake(self) -> bool:
        return self.provider.strip().lower() == FAKE_PROVIDER.lower()


def load_calendar_config(path: Optional[Path]) -> CalendarConfig:
    if path is None or not Path(path).exists():
        return CalendarConfig(provider=FAKE_PROVIDER)

    try:
        document = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError):
        logger.warning("Could not read calendar settings from %s", path, exc_info=True)
        return CalendarConfig(provider=FAKE_PROVIDER)

    node = document.get("Calendar") if isinstance(document, dict) else None
    if not isinstance(node, dict):
        return CalendarConfig(provider=FAKE_PROVIDER)

    time_zone_id = _read_string(node, "TimeZoneId") or ""
    if not time_zone_id.strip():
        time_zone_id = time.tzname[0]

    return CalendarConfig(
        provider=_read_string(node, "Provider") or "Graph",
        client_id=_read_string(node, "ClientId") or "",
        tenant_id=_read_string(node, "TenantId") or "common",
        redirect_uri=_read_string(node, "RedirectUri") or "http://localhost",
        time_zone_id=time_zone_id,
    )


class FakeCalendarService:
    """Fixed meetings on the first day of the requested window."""

    _FIXTURE: tuple[tuple[str, str, float, float], ...] = (
        ("Team Sync", "Online", 9.0, 9.5),
        ("Focus Block", "Desk", 9.75, 11.25),
        ("1:1", "Teams", 13.0, 13.5),
    )

    def get_events(self, start: datetime, end_exclusive: datetime) -> list[CalEvent]:
        day = start.replace(hour=0, minute=0, second=0, microsecond=0)
        events = [
            CalEvent(
                subject=subject,
                location=location,
                start=day + timedelta(hours=begin),
                end=day + timedelta(hours=finish),
            )
            for subject, location, begin, finish in self._FIXTURE
        ]
        return sorted(
            (event for event in events if event.start < end_exclusive and event.end > start),
            key=lambda event: event.start,
        )


def create_calendar_service(config: CalendarConfig) -> FakeCalendarService:
    if not config.is_fake:
        logger.warning(
            "Calendar provider %r requires interactive sign-in; using the fixture feed.",
            config.provider,
        )
    return FakeCalendarService()


def _read_string(node: dict, name: str) -> Optional[str]:
    value = node.get(name)
    return value if isinstance(value, str) else None
