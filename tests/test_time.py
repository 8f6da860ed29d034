"""Tests for playback-time / index conversions."""

from __future__ import annotations

import math

import pytest

from fluxpeaks.errors import PreconditionError
from fluxpeaks.utils.time import clamp_index, map_time_to_index, time_from_index


class TestMapTimeToIndex:
    def test_start_maps_to_zero(self) -> None:
        assert map_time_to_index(0.0, 12.3, 530) == 0

    @pytest.mark.parametrize(("duration", "count"), [(1.0, 43), (12.3, 530), (180.0, 7751)])
    def test_just_before_end_maps_to_last(self, duration: float, count: int) -> None:
        assert map_time_to_index(duration - 1e-9, duration, count) == count - 1

    def test_formula_is_floor_of_time_over_sample_length(self) -> None:
        duration, count = 7.77, 335
        for t in (0.01, 1.0, 3.3333, 6.5, 7.7):
            assert map_time_to_index(t, duration, count) == math.floor(t / (duration / count))

    def test_invalid_inputs(self) -> None:
        with pytest.raises(PreconditionError):
            map_time_to_index(1.0, 0.0, 10)
        with pytest.raises(PreconditionError):
            map_time_to_index(1.0, 2.0, 0)


class TestHelpers:
    def test_time_from_index(self) -> None:
        assert time_from_index(0, 44100) == 0.0
        assert time_from_index(44100, 44100) == pytest.approx(1.0)

    def test_clamp_index(self) -> None:
        assert clamp_index(-3, 10) == 0
        assert clamp_index(4, 10) == 4
        assert clamp_index(10, 10) == 9
