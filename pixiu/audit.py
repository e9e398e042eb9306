"""Audit events: recording, listing recent ones and periodic cleanup."""

from __future__ import annotations

import enum
import re
import threading
from datetime import datetime, timedelta
from typing import Any

from pixiu import models
from pixiu.log import get_logger
from pixiu.types import Event, EventType, ResourceType

RETENTION = timedelta(days=7)
CLEAN_INTERVAL = 24 * 3600.0

_UNITS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_COMPONENT = re.compile(r"([0-9]*(?:\.[0-9]*)?)(ns|us|µs|μs|ms|s|m|h)")
_MAX_NS = 2**63 - 1


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as "300ms", "-1.5h" or "2h45m"."""
    s = text
    negative = False
    if s and s[0] in "+-":
        negative = s[0] == "-"
        s = s[1:]
    if s == "0":
        return timedelta(0)
    if not s:
        raise ValueError(f"time: invalid duration {text!r}")

    total = 0
    pos = 0
    while pos < len(s):
        match = _COMPONENT.match(s, pos)
        if match is None or match.group(1) in ("", "."):
            raise ValueError(f"time: invalid duration {text!r}")
        number, unit = match.groups()
        scale = _UNITS[unit]
        whole, _, frac = number.partition(".")
        total += int(whole or 0) * scale
        if frac:
            total += int(frac) * scale // 10 ** len(frac)
        pos = match.end()

    limit = _MAX_NS + 1 if negative else _MAX_NS
    if total > limit:
        raise ValueError(f"time: invalid duration {text!r}")
    micros = total // 1000
    return timedelta(microseconds=-micros if negative else micros)


def _text(value: Any) -> str:
    if isinstance(value, enum.Enum):
        return str(value.value)
    return str(value)


def _enum_or_text(kind: type[enum.Enum], value: str) -> Any:
    try:
        return kind(value)
    except ValueError:
        return value


def _to_event(record: models.Event) -> Event:
    return Event(
        user=record.user,
        client_ip=record.client_ip,
        operator=_enum_or_text(EventType, record.operator),
        object=_enum_or_text(ResourceType, record.object),
        message=record.message,
    )


class AuditService:
    """Records audit events and keeps only the recent ones."""

    def __init__(self, factory: Any) -> None:
        self._factory = factory

    def create(self, event: Event) -> None:
        record = models.Event(
            user=event.user,
            client_ip=event.client_ip,
            operator=_text(event.operator),
            object=_text(event.object),
            message=event.message,
        )
        try:
            self._factory.audit().create(record)
        except Exception as exc:
            get_logger().error("failed to create event %s: %s: %s", event.user, event.client_ip, exc)
            raise

    def list(self, duration: str) -> list[Event]:
        """Return the events created within the last ``duration`` (e.g. "24h")."""
        try:
            delta = parse_duration("-" + duration)
        except ValueError as exc:
            get_logger().error("failed to parse %s duration: %s", duration, exc)
            raise
        since = datetime.now() + delta
        try:
            records = self._factory.audit().list(since)
        except Exception as exc:
            get_logger().error("failed to list recently %s events: %s", duration, exc)
            raise
        return [_to_event(record) for record in records]

    def clean(self, now: datetime | None = None) -> datetime:
        """Delete events older than the retention period; return the cutoff used."""
        now = now or datetime.now()
        get_logger().info("starting to clean audit events at %s", now)
        cutoff = now - RETENTION
        self._factory.audit().delete(cutoff)
        return cutoff

    def run(self, stop_event: threading.Event, interval: float | timedelta = CLEAN_INTERVAL) -> threading.Thread:
        """Start a background thread that cleans every ``interval`` until ``stop_event`` is set."""
        seconds = interval.total_seconds() if isinstance(interval, timedelta) else float(interval)
        thread = threading.Thread(
            target=self._clean_loop, args=(stop_event, seconds), name="audit-clean", daemon=True
        )
        thread.start()
        return thread

    def _clean_loop(self, stop_event: threading.Event, seconds: float) -> None:
        get_logger().info("starting audit clean job")
        while not stop_event.wait(seconds):
            try:
                self.clean()
            except Exception as exc:
                get_logger().error("failed to delete audit events: %s", exc)