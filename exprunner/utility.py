"""Duration handling, experiment naming and S3 key helpers."""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from fractions import Fraction
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

_NS_PER_US = 1_000
_NS_PER_MS = 1_000_000
_NS_PER_S = 1_000_000_000

_UNITS = {
    "ns": 1,
    "us": _NS_PER_US,
    "\u00b5s": _NS_PER_US,
    "\u03bcs": _NS_PER_US,
    "ms": _NS_PER_MS,
    "s": _NS_PER_S,
    "m": 60 * _NS_PER_S,
    "h": 3600 * _NS_PER_S,
}

_COMPONENT = re.compile(r"(\d*)(?:\.(\d*))?([^\d.]*)")
_MAX_NS = 2**63 - 1

_TIMESTAMP_ZONE = "Asia/Tokyo"
_TIMESTAMP_FORMAT = "%m-%d-%H-%M-%S"


def _from_ns(ns: int) -> timedelta:
    micro = abs(ns) // _NS_PER_US
    return timedelta(microseconds=micro if ns >= 0 else -micro)


def _to_ns(duration: timedelta) -> int:
    micro = (duration.days * 86_400 + duration.seconds) * 1_000_000 + duration.microseconds
    return micro * _NS_PER_US


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as ``"1h30m"``, ``"1.5s"`` or ``"300ms"``.

    Accepts an optional sign followed by one or more decimal numbers, each
    with a unit among ns, us, µs, ms, s, m and h. Raises ValueError otherwise.
    """
    original = text
    negative = False
    if text and text[0] in "+-":
        negative = text[0] == "-"
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f"invalid duration {original!r}")

    total = Fraction(0)
    pos = 0
    while pos < len(text):
        match = _COMPONENT.match(text, pos)
        whole, fraction, unit = match.groups()
        if not whole and not fraction:
            raise ValueError(f"invalid duration {original!r}")
        if not unit:
            raise ValueError(f"missing unit in duration {original!r}")
        if unit not in _UNITS:
            raise ValueError(f"unknown unit {unit!r} in duration {original!r}")
        value = Fraction(int(whole or "0"))
        if fraction:
            value += Fraction(int(fraction), 10 ** len(fraction))
        total += value * _UNITS[unit]
        pos = match.end()

    ns = int(total)
    limit = _MAX_NS + 1 if negative else _MAX_NS
    if ns > limit:
        raise ValueError(f"invalid duration {original!r}")
    return _from_ns(-ns if negative else ns)


def _with_fraction(value: int, unit: int) -> str:
    whole, rest = divmod(value, unit)
    digits = len(str(unit)) - 1
    fraction = str(rest).rjust(digits, "0").rstrip("0")
    return f"{whole}.{fraction}" if fraction else str(whole)


def format_duration(duration: timedelta) -> str:
    """Render a duration in the compact form, e.g. ``"5m0s"`` or ``"15ms"``."""
    ns = _to_ns(duration)
    if ns == 0:
        return "0s"
    sign = "-" if ns < 0 else ""
    value = abs(ns)

    if value < _NS_PER_S:
        if value < _NS_PER_US:
            return f"{sign}{value}ns"
        if value < _NS_PER_MS:
            return f"{sign}{_with_fraction(value, _NS_PER_US)}\u00b5s"
        return f"{sign}{_with_fraction(value, _NS_PER_MS)}ms"

    total_seconds, sub_second = divmod(value, _NS_PER_S)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    seconds_text = _with_fraction(seconds * _NS_PER_S + sub_second, _NS_PER_S)

    parts = [sign]
    if hours:
        parts.append(f"{hours}h")
    if hours or minutes:
        parts.append(f"{minutes}m")
    parts.append(f"{seconds_text}s")
    return "".join(parts)


def parse_duration_with_default(text: str, default: timedelta) -> timedelta:
    """Parse ``text`` as a duration, falling back to ``default`` when it is invalid."""
    try:
        return parse_duration(text)
    except ValueError:
        return default


def get_timestamped_name(experiment_name: str) -> str:
    """Append the current Japan time as ``mm-dd-hh-mm-ss`` to the name."""
    try:
        zone = ZoneInfo(_TIMESTAMP_ZONE)
    except (ZoneInfoNotFoundError, ValueError) as err:
        print(f"failed to load location. Abort using timestamp. {err}", end="")
        return experiment_name
    stamp = datetime.now(zone).strftime(_TIMESTAMP_FORMAT)
    return f"{experiment_name}-{stamp}"


def get_s3_key(experiment_name: str, deployment_name: str) -> str:
    """Join an experiment directory and a deployment name into an S3 key."""
    return f"{experiment_name}/{deployment_name}"