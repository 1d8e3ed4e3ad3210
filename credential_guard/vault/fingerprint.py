"""
Device Fingerprint — low-entropy environment signals used as KDF input.

The fingerprint binds the derived key to the machine. It is a convenience
binding, not a secret: every signal is readable by any local process.
"""
import os
import locale
import platform
from typing import Callable, Optional, Protocol, runtime_checkable
from datetime import datetime

UNKNOWN = "unknown"
SEPARATOR = "|"


@runtime_checkable
class DeviceInfoProvider(Protocol):
    """Anything that can produce a deterministic device fingerprint."""

    def fingerprint(self) -> str:
        ...


def _platform_string() -> str:
    return platform.platform()


def _locale_string() -> str:
    lang, _ = locale.getlocale()
    return lang or os.environ.get("LANG", "").split(".")[0]


def _color_depth() -> str:
    colorterm = os.environ.get("COLORTERM", "").lower()
    if colorterm in ("truecolor", "24bit"):
        return "24"
    if "256color" in os.environ.get("TERM", ""):
        return "8"
    return ""


def _timezone_offset() -> str:
    # minutes behind UTC, so UTC+2 yields "-120"
    offset = datetime.now().astimezone().utcoffset()
    if offset is None:
        return ""
    return str(-int(offset.total_seconds() // 60))


def _cpu_count() -> str:
    count = os.cpu_count()
    return str(count) if count else ""


class SystemDeviceInfo:
    """Fingerprint built from the running environment.

    Signals, in order: platform string, locale, colour depth,
    timezone offset, logical processor count. Any signal that is
    missing or fails to resolve becomes ``"unknown"``.
    """

    signals: tuple[Callable[[], str], ...] = (
        _platform_string,
        _locale_string,
        _color_depth,
        _timezone_offset,
        _cpu_count,
    )

    def __init__(self) -> None:
        self._fingerprint: Optional[str] = None

    @staticmethod
    def _read(signal: Callable[[], str]) -> str:
        try:
            value = signal()
        except Exception:
            return UNKNOWN
        return value or UNKNOWN

    def components(self) -> list[str]:
        """Return the individual signal values, in fingerprint order."""
        return [self._read(signal) for signal in self.signals]

    def fingerprint(self) -> str:
        if self._fingerprint is None:
            self._fingerprint = SEPARATOR.join(self.components())
        return self._fingerprint


class StaticDeviceInfo:
    """Fixed fingerprint, for tests and pinned configurations."""

    def __init__(self, value: str) -> None:
        self._value = value

    def fingerprint(self) -> str:
        return self._value
