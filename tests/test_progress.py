from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from rice_timeline.errors import InvalidDate
from rice_timeline.progress import (
    calculate_progress,
    days_elapsed,
    days_until_next_stage,
    get_current_stage_index,
    predict_completion_date,
    stage_index_for_day,
)

START = date(2025, 1, 1)


def _day(n: int) -> date:
    return START + timedelta(days=n)


def test_days_elapsed_whole_days():
    assert days_elapsed(START, _day(0)) == 0
    assert days_elapsed(START, _day(45)) == 45


def test_days_elapsed_floors_partial_days():
    assert days_elapsed("2025-01-01", "2025-01-02T23:59:59") == 1
    assert days_elapsed("2025-01-01T12:00:00Z", "2025-01-02T11:59:59Z") == 0


def test_days_elapsed_clamps_future_start():
    assert days_elapsed(_day(10), START) == 0


def test_days_elapsed_accepts_aware_datetimes():
    start = datetime(2025, 1, 1, 0, 0, tzinfo=timezone(timedelta(hours=8)))
    now = datetime(2025, 1, 1, 16, 0, tzinfo=UTC)
    # 2024-12-31T16:00Z to 2025-01-01T16:00Z
    assert days_elapsed(start, now) == 1


def test_days_elapsed_defaults_to_current_time():
    assert days_elapsed(datetime.now(UTC) - timedelta(days=3, hours=1)) == 3


@pytest.mark.parametrize("value", [None, "", "   ", "not a date", "2025-13-45", 12345, [2025, 1, 1]])
def test_invalid_start_date_is_rejected(value):
    with pytest.raises(InvalidDate):
        days_elapsed(value, START)


def test_invalid_date_is_value_error():
    with pytest.raises(ValueError):
        calculate_progress("yesterday-ish", START)


def test_calculate_progress_at_start():
    result = calculate_progress(START, START)
    assert result.days_elapsed == 0
    assert result.percentage == 0
    assert result.total_days == 123
    assert result.is_complete is False
    assert result.current_stage_index == 0


def test_calculate_progress_future_start():
    result = calculate_progress(_day(30), START)
    assert result.days_elapsed == 0
    assert result.percentage == 0
    assert result.is_complete is False


def test_calculate_progress_midway():
    result = calculate_progress(START, _day(45))
    assert result.percentage == pytest.approx(45 / 123 * 100)
    assert result.current_stage_index == 4
    assert result.is_complete is False


def test_calculate_progress_completion_boundary():
    assert calculate_progress(START, _day(122)).is_complete is False
    done = calculate_progress(START, _day(123))
    assert done.is_complete is True
    assert done.percentage == 100


def test_calculate_progress_caps_percentage():
    result = calculate_progress(START, _day(200))
    assert result.percentage == 100
    assert result.days_elapsed == 200
    assert result.current_stage_index == 5


def test_percentage_is_monotonic():
    values = [calculate_progress(START, _day(n)).percentage for n in range(0, 200)]
    assert values == sorted(values)
    assert max(values) == 100


def test_progress_as_dict():
    assert calculate_progress(START, _day(30)).as_dict() == {
        "percentage": pytest.approx(30 / 123 * 100),
        "daysElapsed": 30,
        "totalDays": 123,
        "isComplete": False,
        "currentStageIndex": 3,
    }


@pytest.mark.parametrize(
    "days,expected",
    [(0, 0), (2, 0), (3, 1), (28, 1), (29, 2), (30, 3), (44, 3), (45, 4), (112, 4), (113, 5), (200, 5)],
)
def test_stage_index_for_day(days, expected):
    assert stage_index_for_day(days) == expected


def test_get_current_stage_index():
    assert get_current_stage_index(START, _day(45)) == 4
    assert get_current_stage_index("2025-01-01", "2025-01-04") == 1


def test_stage_index_defaults_to_first_stage(make_timeline):
    timeline = make_timeline((5, [5]), (8, [8]))
    assert stage_index_for_day(2, timeline=timeline) == 0
    assert stage_index_for_day(8, timeline=timeline) == 1


def test_stage_index_equal_offsets_picks_last(make_timeline):
    timeline = make_timeline((0, [0]), (4, [4]), (4, [4]))
    assert stage_index_for_day(4, timeline=timeline) == 2


def test_custom_total_days(make_timeline):
    timeline = make_timeline((0, [0]), total_days=10)
    result = calculate_progress(START, _day(5), timeline=timeline)
    assert result.percentage == 50
    assert result.total_days == 10


def test_predict_completion_date():
    assert predict_completion_date(START) == date(2025, 5, 4)
    assert predict_completion_date("2025-01-01T18:30:00") == date(2025, 5, 4)


def test_days_until_next_stage():
    assert days_until_next_stage(START, START) == 3
    assert days_until_next_stage(START, _day(29)) == 1
    assert days_until_next_stage(START, _day(50)) == 63
    assert days_until_next_stage(START, _day(113)) is None
