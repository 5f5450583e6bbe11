"""Property-based tests for save timestamps.

For any sequence of save times, including a clock that jumps backwards:
1. created_at is set once and never changes
2. updated_at is strictly increasing from one save to the next
3. updated_at is never before created_at
"""

from datetime import datetime, timedelta, timezone

from hypothesis import given, settings, strategies as st

from incident_reviewer.entities import Trigger, stamp


save_times = st.lists(
    st.datetimes(
        min_value=datetime(2000, 1, 1),
        max_value=datetime(2100, 1, 1),
        timezones=st.just(timezone.utc),
    ),
    min_size=1,
    max_size=20,
)


@given(times=save_times)
@settings(max_examples=200)
def test_timestamps_over_repeated_saves(times):
    """Property: repeated saves keep created_at and advance updated_at."""
    trigger = Trigger.new(name="Deploy", description="A release went out")

    record = stamp(trigger, times[0])
    assert record.created_at == record.updated_at == times[0]

    for now in times[1:]:
        previous = record
        record = stamp(record, now)

        assert record.created_at == times[0]
        assert record.updated_at > previous.updated_at
        assert record.updated_at >= now or record.updated_at == previous.updated_at + timedelta(microseconds=1)


@given(now=st.datetimes(timezones=st.just(timezone.utc)))
def test_first_save_uses_now(now):
    """Property: a never saved record takes the save time for both timestamps."""
    record = stamp(Trigger.new(name="Deploy", description="A release went out"), now)

    assert record.created_at == now
    assert record.updated_at == now
