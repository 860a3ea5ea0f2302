# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Time scales and the AstroTime epoch.

The chain UTC → TAI → TT → TDB is walked in seconds since J2000.0, read
as 2000-01-01 12:00:00 on each scale's own clock. Propagation integrates
in a dynamical scale (TT or TDB); AstroTime turns elapsed seconds in that
scale back into an absolute epoch.
"""

import json
import math
import numbers
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from pathlib import Path
from typing import Optional

import numpy as np

SECONDS_PER_DAY: float = 86400.0

_J2000_JD = 2451545.0
_J2000_CALENDAR = datetime(2000, 1, 1, 12, tzinfo=timezone.utc)
_SECONDS_PER_CENTURY = 36525.0 * SECONDS_PER_DAY
_TT_MINUS_TAI = 32.184
_LEAP_TABLE_PATH = Path(__file__).resolve().parent.parent / "data" / "tai_utc.json"


class TimeScale(Enum):
    """Dynamical scales usable as the integration time coordinate."""
    TT = "TT"
    TDB = "TDB"


def _calendar_seconds(dt: datetime) -> float:
    """Seconds from 2000-01-01 12:00 to ``dt`` on the same clock. Naive means UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (dt - _J2000_CALENDAR).total_seconds()


def _calendar_datetime(seconds: float) -> datetime:
    return _J2000_CALENDAR + timedelta(seconds=seconds)


# --- Leap seconds ---

_leap_table_cache: Optional[tuple[np.ndarray, np.ndarray]] = None


def _leap_table() -> tuple[np.ndarray, np.ndarray]:
    """Effective UTC instants (calendar seconds) and TAI-UTC values, loaded once."""
    global _leap_table_cache
    if _leap_table_cache is None:
        with open(_LEAP_TABLE_PATH) as f:
            entries = json.load(f)["entries"]
        starts = np.array([_calendar_seconds(datetime.fromisoformat(e["date"])) for e in entries])
        offsets = np.array([float(e["tai_utc"]) for e in entries])
        _leap_table_cache = (starts, offsets)
    return _leap_table_cache


def _tai_minus_utc(utc_seconds: float) -> float:
    starts, offsets = _leap_table()
    index = int(np.searchsorted(starts, utc_seconds, side="right")) - 1
    if index < 0:
        raise ValueError(
            f"UTC {_calendar_datetime(utc_seconds).isoformat()} precedes the "
            "leap-second table (1972-01-01)"
        )
    return float(offsets[index])


def utc_to_tai_seconds(dt: datetime) -> float:
    """TAI-UTC (ΔAT) in effect at the UTC instant ``dt``.

    Raises:
        ValueError: before 1972-01-01, where UTC had no whole-second offset.
    """
    return _tai_minus_utc(_calendar_seconds(dt))


def _tdb_minus_tt(centuries: float) -> float:
    """TDB - TT in seconds from the two leading Fairhead & Bretagnon terms (~30 μs)."""
    g = math.radians(357.5277233 + 35999.160503 * centuries)
    l_jup = math.radians(246.11 + 3034.906 * centuries)
    return 0.001657 * math.sin(g) + 0.000022 * math.sin(l_jup - g)


# --- Epoch ---

@dataclass(frozen=True, order=True)
class AstroTime:
    """Epoch stored as seconds since J2000.0 TDB."""

    tdb_j2000: float

    @staticmethod
    def from_utc(dt: datetime) -> "AstroTime":
        """Epoch of a UTC calendar instant. Naive datetimes are read as UTC."""
        utc_s = _calendar_seconds(dt)
        return AstroTime.from_tt_seconds(utc_s + _tai_minus_utc(utc_s) + _TT_MINUS_TAI)

    @staticmethod
    def from_tai(dt: datetime) -> "AstroTime":
        """Epoch of a calendar instant read on the TAI clock."""
        return AstroTime.from_tt_seconds(_calendar_seconds(dt) + _TT_MINUS_TAI)

    @staticmethod
    def from_tt_seconds(tt_seconds: float) -> "AstroTime":
        tt_seconds = float(tt_seconds)
        return AstroTime(tdb_j2000=tt_seconds + _tdb_minus_tt(tt_seconds / _SECONDS_PER_CENTURY))

    @staticmethod
    def from_julian_date_tt(jd_tt: float) -> "AstroTime":
        return AstroTime.from_tt_seconds((jd_tt - _J2000_JD) * SECONDS_PER_DAY)

    @staticmethod
    def from_julian_date_tdb(jd_tdb: float) -> "AstroTime":
        return AstroTime(tdb_j2000=(jd_tdb - _J2000_JD) * SECONDS_PER_DAY)

    @staticmethod
    def from_seconds(scale: TimeScale, seconds: float) -> "AstroTime":
        """Epoch ``seconds`` after J2000.0 as counted in ``scale``."""
        if scale is TimeScale.TDB:
            return AstroTime(tdb_j2000=float(seconds))
        if scale is TimeScale.TT:
            return AstroTime.from_tt_seconds(seconds)
        raise ValueError(f"No conversion for time scale {scale!r}")

    def to_tt_seconds(self) -> float:
        # The periodic term is evaluated at TDB instead of TT; the difference
        # moves it by well under a nanosecond.
        return self.tdb_j2000 - _tdb_minus_tt(self.tdb_j2000 / _SECONDS_PER_CENTURY)

    def seconds_in(self, scale: TimeScale) -> float:
        """Seconds since J2000.0 as counted in ``scale``."""
        if scale is TimeScale.TDB:
            return self.tdb_j2000
        if scale is TimeScale.TT:
            return self.to_tt_seconds()
        raise ValueError(f"No conversion for time scale {scale!r}")

    def to_julian_date(self, scale: TimeScale = TimeScale.TDB) -> float:
        return _J2000_JD + self.seconds_in(scale) / SECONDS_PER_DAY

    def to_julian_date_tdb(self) -> float:
        return self.to_julian_date(TimeScale.TDB)

    def to_julian_centuries_tdb(self) -> float:
        """Julian centuries of TDB since J2000.0, the usual ephemeris argument."""
        return self.tdb_j2000 / _SECONDS_PER_CENTURY

    def to_utc_datetime(self) -> datetime:
        """UTC calendar instant (timezone-aware).

        ΔAT is tabulated against UTC, which is the unknown here, so it is
        refined starting from the most recent offset. Before 1972 the last
        estimate is kept.
        """
        tai_s = self.to_tt_seconds() - _TT_MINUS_TAI
        offset = float(_leap_table()[1][-1])
        for _ in range(2):
            try:
                offset = _tai_minus_utc(tai_s - offset)
            except ValueError:
                break
        return _calendar_datetime(tai_s - offset)

    def __add__(self, seconds: float) -> "AstroTime":
        """Shift by TDB seconds."""
        if not isinstance(seconds, numbers.Real):
            return NotImplemented
        return AstroTime(tdb_j2000=self.tdb_j2000 + float(seconds))

    __radd__ = __add__

    def __sub__(self, other):
        """AstroTime - AstroTime is TDB seconds; AstroTime - seconds is an AstroTime."""
        if isinstance(other, AstroTime):
            return self.tdb_j2000 - other.tdb_j2000
        if isinstance(other, numbers.Real):
            return AstroTime(tdb_j2000=self.tdb_j2000 - float(other))
        return NotImplemented

    def __repr__(self) -> str:
        return f"AstroTime(tdb_j2000={self.tdb_j2000:.6f})"
