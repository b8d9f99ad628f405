import pytest

from tu_scheduler.services.day_patterns import DAY_PATTERNS, generate_time_slots, two_day_patterns
from tu_scheduler.services.exclusion import ExclusionSet
from tu_scheduler.services.time_ranges import TimeRange, add_minutes, format_time, overlaps, parse_time


def tr(start, end):
    return TimeRange.from_strings(start, end)


RANGE_PAIRS = [
    (("09:00", "10:00"), ("09:30", "10:30")),
    (("09:00", "10:00"), ("10:00", "11:00")),
    (("08:00", "12:00"), ("09:00", "10:00")),
    (("13:00", "14:00"), ("08:00", "09:00")),
    (("09:00", "09:01"), ("09:00", "09:01")),
    (("07:59", "08:01"), ("08:00", "17:00")),
]


@pytest.mark.parametrize("a, b", RANGE_PAIRS)
def test_overlap_is_symmetric(a, b):
    assert overlaps(tr(*a), tr(*b)) == overlaps(tr(*b), tr(*a))


@pytest.mark.parametrize("a, _", RANGE_PAIRS)
def test_range_overlaps_itself(a, _):
    assert overlaps(tr(*a), tr(*a))


def test_touching_endpoints_do_not_overlap():
    assert not overlaps(tr("09:00", "10:00"), tr("10:00", "11:00"))
    assert not overlaps(tr("10:00", "11:00"), tr("09:00", "10:00"))


def test_contained_range_overlaps():
    assert overlaps(tr("08:00", "12:00"), tr("09:00", "10:00"))


@pytest.mark.parametrize("value", ["9:00", "24:00", "12:60", "noon", "", "12:00:00", "09:00\n", " 09:00"])
def test_parse_time_rejects_malformed_values(value):
    with pytest.raises(ValueError):
        parse_time(value)


def test_time_range_requires_start_before_end():
    with pytest.raises(ValueError):
        tr("10:00", "10:00")
    with pytest.raises(ValueError):
        tr("11:00", "10:00")


def test_shifted_range_keeps_duration():
    original = tr("09:40", "11:20")
    moved = original.shifted_to(parse_time("13:00"))
    assert moved.duration == 100
    assert str(moved) == "13:00-14:40"


def test_time_formatting_helpers():
    assert parse_time("08:30") == 510
    assert format_time(510) == "08:30"
    assert add_minutes("16:30", 90) == "18:00"


def test_day_pattern_catalog_order():
    assert len(DAY_PATTERNS) == 14
    assert [day.value for day in DAY_PATTERNS[0]] == ["Monday", "Wednesday"]
    assert [day.value for day in DAY_PATTERNS[1]] == ["Tuesday", "Thursday"]
    pairs = two_day_patterns()
    assert len(pairs) == 8
    assert all(len(pattern) == 2 for pattern in pairs)
    singles = [pattern[0].value for pattern in DAY_PATTERNS[8:]]
    assert singles == ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def test_generate_time_slots_excludes_end():
    slots = [format_time(slot) for slot in generate_time_slots("08:00", "17:00", 90)]
    assert slots == ["08:00", "09:30", "11:00", "12:30", "14:00", "15:30"]

    fine = list(generate_time_slots("08:00", "17:00", 30))
    assert len(fine) == 18
    assert format_time(fine[-1]) == "16:30"


def test_generate_time_slots_rejects_non_positive_step():
    with pytest.raises(ValueError):
        list(generate_time_slots("08:00", "17:00", 0))


def test_exclusion_set_distinguishes_empty_from_zero():
    assert 0 not in ExclusionSet.EMPTY
    assert not ExclusionSet.EMPTY
    assert 0 in ExclusionSet([0])
    assert ExclusionSet([0])
    assert ExclusionSet.of(None) is ExclusionSet.EMPTY
    assert ExclusionSet.of([3, 1, 3]) == ExclusionSet([1, 3])
    assert list(ExclusionSet([5, 2])) == [2, 5]
