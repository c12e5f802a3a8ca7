"""
Tests for the lane collection.

Validates smallest-free-index allocation, growth by one lane per
overflow, immediate reuse of released lanes, and misuse errors.
"""

from __future__ import annotations

import pytest

from raillog.exceptions import LaneError
from raillog.slots import SlotAllocator


def _open(slots: SlotAllocator, timestamp: float = 0.0) -> int:
    index = slots.acquire()
    slots.occupy(index, timestamp)
    return index


# ---------------------------------------------------------------------------
# Tests: allocation
# ---------------------------------------------------------------------------


class TestAcquire:

    def test_fresh_collection_returns_lane_zero(self) -> None:
        assert SlotAllocator(3).acquire() == 0

    def test_acquire_without_occupy_returns_same_lane(self) -> None:
        slots = SlotAllocator(3)
        assert slots.acquire() == slots.acquire() == 0

    def test_no_growth_within_capacity(self) -> None:
        slots = SlotAllocator(3)
        indexes = [_open(slots) for _ in range(3)]
        assert indexes == [0, 1, 2]
        assert len(slots) == 3

    def test_grows_by_one_per_overflow(self) -> None:
        slots = SlotAllocator(2)
        for expected_len, expected_index in [(2, 0), (2, 1), (3, 2), (4, 3)]:
            assert _open(slots) == expected_index
            assert len(slots) == expected_len

    def test_zero_initial_lanes(self) -> None:
        slots = SlotAllocator(0)
        assert len(slots) == 0
        assert _open(slots) == 0
        assert len(slots) == 1

    def test_smallest_free_index_wins(self) -> None:
        slots = SlotAllocator(4)
        for _ in range(4):
            _open(slots)
        slots.release(3)
        slots.release(1)
        assert slots.acquire() == 1

    def test_negative_min_slots_rejected(self) -> None:
        with pytest.raises(ValueError):
            SlotAllocator(-1)


# ---------------------------------------------------------------------------
# Tests: release and reuse
# ---------------------------------------------------------------------------


class TestRelease:

    def test_release_then_acquire_reuses_lane(self) -> None:
        slots = SlotAllocator(1)
        for _ in range(3):
            _open(slots)
        slots.release(1)
        assert slots.acquire() == 1
        assert len(slots) == 3

    def test_collection_never_shrinks(self) -> None:
        slots = SlotAllocator(1)
        indexes = [_open(slots) for _ in range(5)]
        for index in indexes:
            slots.release(index)
        assert len(slots) == 5
        assert list(slots) == [None] * 5

    def test_release_empty_lane_raises(self) -> None:
        slots = SlotAllocator(2)
        with pytest.raises(LaneError) as excinfo:
            slots.release(0)
        assert excinfo.value.index == 0

    def test_double_release_raises(self) -> None:
        slots = SlotAllocator(1)
        index = _open(slots)
        slots.release(index)
        with pytest.raises(LaneError):
            slots.release(index)


# ---------------------------------------------------------------------------
# Tests: occupancy
# ---------------------------------------------------------------------------


class TestOccupy:

    def test_occupy_records_start_time(self) -> None:
        slots = SlotAllocator(2)
        slots.occupy(1, 42.0)
        assert slots.start_time(1) == 42.0
        assert slots.start_time(0) is None
        assert list(slots) == [None, 42.0]

    def test_occupy_occupied_lane_raises(self) -> None:
        slots = SlotAllocator(1)
        slots.occupy(0, 1.0)
        with pytest.raises(LaneError):
            slots.occupy(0, 2.0)

    def test_out_of_range_raises(self) -> None:
        slots = SlotAllocator(1)
        with pytest.raises(LaneError):
            slots.occupy(5, 0.0)
        with pytest.raises(LaneError):
            slots.release(-1)

    def test_active_count(self) -> None:
        slots = SlotAllocator(3)
        _open(slots)
        _open(slots)
        assert slots.active == 2
