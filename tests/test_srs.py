from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from src.scheduling.srs import calculate_next_review, is_due, penalize_ease


NOW = datetime(2026, 3, 10, 8, 30, tzinfo=timezone.utc)


def test_first_successful_review_keeps_one_day_interval() -> None:
    schedule = calculate_next_review(5, repetitions=0, interval_days=1, ease_factor=2.5, now=NOW)

    assert schedule.interval_days == 1
    assert schedule.repetitions == 1
    assert schedule.ease_factor == pytest.approx(2.6)
    assert schedule.next_review_at == NOW + timedelta(days=1)


def test_failed_review_resets_progress() -> None:
    schedule = calculate_next_review(2, repetitions=3, interval_days=10, ease_factor=2.0, now=NOW)

    assert schedule.repetitions == 0
    assert schedule.interval_days == 1
    assert schedule.ease_factor == pytest.approx(1.68)
    assert schedule.next_review_at == NOW + timedelta(days=1)


def test_mature_review_multiplies_interval_by_ease() -> None:
    schedule = calculate_next_review(4, repetitions=2, interval_days=6, ease_factor=2.5, now=NOW)

    assert schedule.interval_days == 15
    assert schedule.repetitions == 3
    assert schedule.ease_factor == pytest.approx(2.5)
    assert schedule.next_review_at == NOW + timedelta(days=15)


def test_second_successful_review_jumps_to_six_days() -> None:
    schedule = calculate_next_review(3, repetitions=1, interval_days=1, ease_factor=2.5, now=NOW)

    assert schedule.interval_days == 6
    assert schedule.repetitions == 2
    assert schedule.ease_factor == pytest.approx(2.36)


def test_interval_rounds_half_up() -> None:
    # 5 * 1.3 = 6.5
    schedule = calculate_next_review(5, repetitions=4, interval_days=5, ease_factor=1.3, now=NOW)

    assert schedule.interval_days == 7


@pytest.mark.parametrize("quality", range(6))
@pytest.mark.parametrize("ease_factor", [1.3, 1.5, 2.5, 3.1])
def test_ease_factor_never_drops_below_floor(quality: int, ease_factor: float) -> None:
    for repetitions in (0, 1, 2, 7):
        schedule = calculate_next_review(
            quality, repetitions=repetitions, interval_days=4, ease_factor=ease_factor, now=NOW
        )
        assert schedule.ease_factor >= 1.3
        assert schedule.interval_days >= 1


@pytest.mark.parametrize("quality", [0, 1, 2])
def test_any_failing_quality_resets(quality: int) -> None:
    schedule = calculate_next_review(quality, repetitions=9, interval_days=120, ease_factor=2.8, now=NOW)

    assert schedule.repetitions == 0
    assert schedule.interval_days == 1


@pytest.mark.parametrize("interval_days", [1, 6, 15, 40])
def test_successful_mature_review_never_shrinks_interval(interval_days: int) -> None:
    schedule = calculate_next_review(
        3, repetitions=2, interval_days=interval_days, ease_factor=1.3, now=NOW
    )

    assert schedule.interval_days >= interval_days


def test_out_of_range_quality_is_clamped() -> None:
    high = calculate_next_review(9, repetitions=0, interval_days=1, ease_factor=2.5, now=NOW)
    low = calculate_next_review(-4, repetitions=3, interval_days=10, ease_factor=2.5, now=NOW)

    assert high.ease_factor == pytest.approx(2.6)
    assert low.repetitions == 0
    assert low.ease_factor == pytest.approx(1.7)


def test_missing_state_uses_initial_values() -> None:
    schedule = calculate_next_review(4, repetitions=None, interval_days=None, ease_factor=None, now=NOW)

    assert schedule.repetitions == 1
    assert schedule.interval_days == 1
    assert schedule.ease_factor == pytest.approx(2.5)


def test_negative_repetitions_count_as_new_item() -> None:
    schedule = calculate_next_review(5, repetitions=-2, interval_days=10, ease_factor=2.5, now=NOW)

    assert schedule.repetitions == 1
    assert schedule.interval_days == 1


def test_default_now_is_current_time() -> None:
    before = datetime.now(timezone.utc)
    schedule = calculate_next_review(5)

    assert schedule.next_review_at >= before + timedelta(days=1)


def test_is_due_compares_calendar_days() -> None:
    today = date(2026, 3, 10)

    assert is_due(None, today)
    assert is_due(datetime(2026, 3, 10, 23, 0, tzinfo=timezone.utc), today)
    assert is_due(datetime(2026, 3, 1, tzinfo=timezone.utc), today)
    assert not is_due(datetime(2026, 3, 11, 0, 5, tzinfo=timezone.utc), today)


def test_penalize_ease_respects_floor() -> None:
    assert penalize_ease(2.5) == pytest.approx(2.3)
    assert penalize_ease(1.4) == pytest.approx(1.3)
    assert penalize_ease(None) == pytest.approx(2.3)
