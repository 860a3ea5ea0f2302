# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for AstroTime value object and time system conversions."""

import ast
from datetime import datetime, timezone

import pytest


class TestAstroTimeConstruction:
    """AstroTime creation and basic properties."""

    def test_from_utc_returns_astro_time(self):
        from orbitprop.domain.time_systems import AstroTime

        t = AstroTime.from_utc(datetime(2000, 1, 1, 12, 0, 0, tzinfo=timezone.utc))
        assert isinstance(t, AstroTime)

    def test_from_utc_near_j2000(self):
        """UTC 11:58:55.816 on 2000-01-01 is 12:00:00 TT (TAI-UTC=32, TT-TAI=32.184)."""
        from orbitprop.domain.time_systems import AstroTime

        t = AstroTime.from_utc(datetime(2000, 1, 1, 11, 58, 55, 816000, tzinfo=timezone.utc))
        assert abs(t.to_tt_seconds()) < 1e-3

    def test_naive_datetime_treated_as_utc(self):
        from orbitprop.domain.time_systems import AstroTime

        naive = datetime(2020, 6, 15, 12, 0, 0)
        aware = datetime(2020, 6, 15, 12, 0, 0, tzinfo=timezone.utc)
        assert AstroTime.from_utc(naive).tdb_j2000 == AstroTime.from_utc(aware).tdb_j2000

    def test_frozen_dataclass(self):
        from orbitprop.domain.time_systems import AstroTime

        t = AstroTime.from_utc(datetime(2020, 1, 1, tzinfo=timezone.utc))
        with pytest.raises(AttributeError):
            t.tdb_j2000 = 999.0  # type: ignore[misc]

    def test_from_tai_is_utc_plus_leap_seconds(self):
        from orbitprop.domain.time_systems import AstroTime

        utc = AstroTime.from_utc(datetime(2020, 1, 1, tzinfo=timezone.utc))
        tai = AstroTime.from_tai(datetime(2020, 1, 1, 0, 0, 37, tzinfo=timezone.utc))
        assert abs(utc - tai) < 1e-4

    def test_julian_date_tdb_roundtrip(self):
        from orbitprop.domain.time_systems import AstroTime

        t = AstroTime.from_julian_date_tdb(2460000.5)
        assert t.to_julian_date_tdb() == pytest.approx(2460000.5, abs=1e-9)


class TestTimeScales:
    """TT/TDB dynamical scales."""

    def test_tt_and_tdb_differ_by_milliseconds(self):
        from orbitprop.domain.time_systems import AstroTime, TimeScale

        t = AstroTime.from_utc(datetime(2026, 4, 1, tzinfo=timezone.utc))
        diff = t.seconds_in(TimeScale.TDB) - t.seconds_in(TimeScale.TT)
        assert 0.0 < abs(diff) < 2e-3

    @pytest.mark.parametrize("seconds", [0.0, -3.2e8, 8.1e8])
    def test_from_seconds_roundtrip_tt(self, seconds):
        from orbitprop.domain.time_systems import AstroTime, TimeScale

        t = AstroTime.from_seconds(TimeScale.TT, seconds)
        assert t.seconds_in(TimeScale.TT) == pytest.approx(seconds, abs=1e-6)

    def test_from_seconds_tdb_is_identity(self):
        from orbitprop.domain.time_systems import AstroTime, TimeScale

        t = AstroTime.from_seconds(TimeScale.TDB, 12345.5)
        assert t.tdb_j2000 == 12345.5

    def test_elapsed_tt_seconds_match_tdb_seconds_over_an_hour(self):
        from orbitprop.domain.time_systems import AstroTime, TimeScale

        start = AstroTime.from_seconds(TimeScale.TT, 8.0e8)
        end = AstroTime.from_seconds(TimeScale.TT, 8.0e8 + 3600.0)
        assert end.seconds_in(TimeScale.TT) - start.seconds_in(TimeScale.TT) == pytest.approx(3600.0, abs=1e-6)
        assert abs((end - start) - 3600.0) < 1e-5

    def test_julian_date_in_scale(self):
        from orbitprop.domain.time_systems import AstroTime, TimeScale

        t = AstroTime.from_julian_date_tt(2451545.0)
        assert t.to_julian_date(TimeScale.TT) == pytest.approx(2451545.0, abs=1e-9)

    def test_unsupported_scale_raises(self):
        from orbitprop.domain.time_systems import AstroTime

        with pytest.raises(ValueError):
            AstroTime.from_seconds("UTC", 0.0)


class TestLeapSeconds:

    def test_offset_after_2017(self):
        from orbitprop.domain.time_systems import utc_to_tai_seconds

        assert utc_to_tai_seconds(datetime(2020, 1, 1, tzinfo=timezone.utc)) == 37.0

    def test_offset_just_before_2017(self):
        from orbitprop.domain.time_systems import utc_to_tai_seconds

        assert utc_to_tai_seconds(datetime(2016, 12, 31, 23, 59, 59, tzinfo=timezone.utc)) == 36.0

    def test_offset_at_1972(self):
        from orbitprop.domain.time_systems import utc_to_tai_seconds

        assert utc_to_tai_seconds(datetime(1972, 1, 1, tzinfo=timezone.utc)) == 10.0

    def test_before_1972_raises(self):
        from orbitprop.domain.time_systems import utc_to_tai_seconds

        with pytest.raises(ValueError):
            utc_to_tai_seconds(datetime(1970, 1, 1, tzinfo=timezone.utc))


class TestUtcRoundtrip:

    @pytest.mark.parametrize("dt", [
        datetime(2000, 1, 1, 12, 0, 0, tzinfo=timezone.utc),
        datetime(2026, 3, 20, 6, 30, 15, tzinfo=timezone.utc),
        datetime(1999, 7, 4, 23, 0, 0, tzinfo=timezone.utc),
    ])
    def test_to_utc_inverts_from_utc(self, dt):
        from orbitprop.domain.time_systems import AstroTime

        back = AstroTime.from_utc(dt).to_utc_datetime()
        assert abs((back - dt).total_seconds()) < 1e-3


class TestArithmetic:

    def test_add_and_subtract_seconds(self):
        from orbitprop.domain.time_systems import AstroTime

        t = AstroTime(tdb_j2000=1000.0)
        assert (t + 60.0).tdb_j2000 == 1060.0
        assert (60.0 + t).tdb_j2000 == 1060.0
        assert (t - 60.0).tdb_j2000 == 940.0

    def test_numpy_scalars_shift_epoch(self):
        import numpy as np

        from orbitprop.domain.time_systems import AstroTime

        t = AstroTime(tdb_j2000=1000.0)
        assert (t + np.int64(60)).tdb_j2000 == 1060.0
        assert (t - np.float32(60.0)).tdb_j2000 == 940.0
        assert type((t + np.float32(0.5)).tdb_j2000) is float

    def test_difference_of_times_is_seconds(self):
        from orbitprop.domain.time_systems import AstroTime

        assert AstroTime(tdb_j2000=500.0) - AstroTime(tdb_j2000=200.0) == 300.0

    def test_ordering(self):
        from orbitprop.domain.time_systems import AstroTime

        t = AstroTime(tdb_j2000=0.0)
        assert t < t + 1.0
        assert max(t, t + 5.0) == t + 5.0


# ── Domain purity ────────────────────────────────────────────────────

class TestTimeSystemsPurity:

    def test_time_systems_imports_only_stdlib_numpy_and_domain(self):
        import orbitprop.domain.time_systems as mod

        allowed = {"math", "numbers", "json", "dataclasses", "datetime", "enum", "pathlib", "typing", "numpy"}
        with open(mod.__file__) as f:
            tree = ast.parse(f.read())

        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    root = alias.name.split(".")[0]
                    assert root in allowed or root == "orbitprop", f"Disallowed import '{alias.name}'"
            if isinstance(node, ast.ImportFrom):
                if node.module and node.level == 0:
                    root = node.module.split(".")[0]
                    assert root in allowed or root == "orbitprop", f"Disallowed import from '{node.module}'"
