"""Unit tests for entity records: timestamps, review updates and bindings."""

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from uuid import UUID

import pytest

from incident_reviewer.entities import Cause, Review, ReviewCause, ReviewTrigger, stamp
from incident_reviewer.errors import DuplicateBindingError, NotBoundError
from incident_reviewer.ids import NIL_ID, is_nil


NOW = datetime(2024, 12, 17, 18, 50, 2, tzinfo=timezone.utc)
UNKNOWN_ID = UUID("0193dd86-b07e-7e73-a77e-0000000000ff")


class TestStamp:
    """Tests for setting timestamps on save."""

    def test_first_save_sets_both_timestamps(self, cause):
        stamped = stamp(cause, NOW)

        assert stamped.created_at == NOW
        assert stamped.updated_at == NOW
        assert cause.created_at is None

    def test_later_save_keeps_created_at(self, cause):
        first = stamp(cause, NOW)
        second = stamp(first, NOW + timedelta(seconds=5))

        assert second.created_at == NOW
        assert second.updated_at == NOW + timedelta(seconds=5)

    def test_save_in_same_instant_still_advances(self, cause):
        first = stamp(cause, NOW)
        second = stamp(first, NOW)

        assert second.updated_at > first.updated_at
        assert second.updated_at > second.created_at

    def test_clock_going_backwards_still_advances(self, cause):
        first = stamp(stamp(cause, NOW), NOW + timedelta(minutes=1))
        second = stamp(first, NOW - timedelta(hours=1))

        assert second.updated_at > first.updated_at

    def test_defaults_to_current_time(self, cause):
        before = datetime.now(timezone.utc)
        stamped = stamp(cause)

        assert stamped.created_at >= before
        assert stamped.created_at.tzinfo is not None


class TestNew:

    def test_new_assigns_id(self):
        cause = Cause.new(name="n", description="d", category="c")

        assert not is_nil(cause.id)
        assert cause.created_at is None

    def test_zero_value_has_nil_id(self):
        assert Review().id == NIL_ID
        assert Review().bound_causes == ()


class TestReviewUpdate:
    """Tests for merging edits into a review."""

    def test_copies_non_empty_fields(self, saved_review):
        updated = saved_review.update(Review(title="New title", impact="Everyone"))

        assert updated.title == "New title"
        assert updated.impact == "Everyone"
        assert updated.description == saved_review.description
        assert updated.url == saved_review.url

    def test_keeps_identity_timestamps_and_bindings(self, saved_review, cause):
        review = saved_review.bind_cause(ReviewCause(cause=cause, why="because"))
        changes = Review.new(title="Other", created_at=NOW)

        updated = review.update(changes)

        assert updated.id == review.id
        assert updated.created_at == review.created_at
        assert updated.bound_causes == review.bound_causes

    def test_empty_changes_leave_review_unchanged(self, saved_review):
        assert saved_review.update(Review()) == saved_review


class TestBindCause:
    """Tests for binding contributing causes."""

    def test_appends_binding_with_new_id(self, valid_review, cause):
        review = valid_review.bind_cause(ReviewCause(cause=cause, why="It was down"))

        assert len(review.bound_causes) == 1
        binding = review.bound_causes[0]
        assert binding.cause == cause
        assert binding.why == "It was down"
        assert not is_nil(binding.id)
        assert valid_review.bound_causes == ()

    def test_keeps_given_binding_id(self, valid_review, cause):
        binding_id = UUID("0193dd86-b07e-7e73-a77e-0000000000aa")

        review = valid_review.bind_cause(ReviewCause(id=binding_id, cause=cause, why="It was down"))

        assert review.bound_causes[0].id == binding_id

    def test_preserves_bind_order(self, valid_review, cause, other_cause):
        review = valid_review.bind_cause(ReviewCause(cause=cause, why="first"))
        review = review.bind_cause(ReviewCause(cause=other_cause, why="second"))

        assert [b.why for b in review.bound_causes] == ["first", "second"]

    def test_duplicate_cause_is_rejected(self, valid_review, cause):
        review = valid_review.bind_cause(ReviewCause(cause=cause, why="first"))

        with pytest.raises(DuplicateBindingError) as exc_info:
            review.bind_cause(ReviewCause(cause=cause, why="again"))

        assert exc_info.value.id == cause.id
        assert exc_info.value.review_id == valid_review.id

    def test_only_one_proximal_cause(self, valid_review, cause, other_cause):
        review = valid_review.bind_cause(ReviewCause(cause=cause, why="a", is_proximal_cause=True))
        review = review.bind_cause(ReviewCause(cause=other_cause, why="b", is_proximal_cause=True))

        assert [b.is_proximal_cause for b in review.bound_causes] == [False, True]

    def test_non_proximal_bind_keeps_existing_proximal(self, valid_review, cause, other_cause):
        review = valid_review.bind_cause(ReviewCause(cause=cause, why="a", is_proximal_cause=True))
        review = review.bind_cause(ReviewCause(cause=other_cause, why="b"))

        assert [b.is_proximal_cause for b in review.bound_causes] == [True, False]


class TestBoundCause:

    def test_lookup_by_binding_id(self, valid_review, cause):
        review = valid_review.bind_cause(ReviewCause(cause=cause, why="a"))
        binding = review.bound_causes[0]

        assert review.bound_cause(binding.id) == binding
        assert review.bound_cause_for(cause.id) == binding

    def test_unknown_binding_id(self, valid_review, cause):
        review = valid_review.bind_cause(ReviewCause(cause=cause, why="a"))

        with pytest.raises(NotBoundError):
            review.bound_cause(UNKNOWN_ID)

        assert review.bound_cause_for(UNKNOWN_ID) is None


class TestUpdateBoundCause:
    """Tests for editing an existing cause binding."""

    def test_replaces_in_place(self, valid_review, cause, other_cause):
        review = valid_review.bind_cause(ReviewCause(cause=cause, why="first"))
        review = review.bind_cause(ReviewCause(cause=other_cause, why="second"))
        original = review.bound_causes[0]

        updated = review.update_bound_cause(ReviewCause(cause=cause, why="rewritten"))

        assert [b.why for b in updated.bound_causes] == ["rewritten", "second"]
        assert updated.bound_causes[0].id == original.id

    def test_uses_new_cause_details(self, valid_review, cause):
        review = valid_review.bind_cause(ReviewCause(cause=cause, why="first"))
        renamed = replace(cause, name="Vendor outage")

        updated = review.update_bound_cause(ReviewCause(cause=renamed, why="first"))

        assert updated.bound_causes[0].cause.name == "Vendor outage"

    def test_marking_proximal_unmarks_others(self, valid_review, cause, other_cause):
        review = valid_review.bind_cause(ReviewCause(cause=cause, why="a", is_proximal_cause=True))
        review = review.bind_cause(ReviewCause(cause=other_cause, why="b"))

        updated = review.update_bound_cause(
            ReviewCause(cause=other_cause, why="b", is_proximal_cause=True)
        )

        assert [b.is_proximal_cause for b in updated.bound_causes] == [False, True]

    def test_unbound_cause_is_rejected(self, valid_review, cause):
        with pytest.raises(NotBoundError) as exc_info:
            valid_review.update_bound_cause(ReviewCause(cause=cause, why="a"))

        assert exc_info.value.id == cause.id


class TestBindTrigger:
    """Tests for binding triggers."""

    def test_appends_binding(self, valid_review, trigger):
        review = valid_review.bind_trigger(ReviewTrigger(trigger=trigger, why="Black friday"))

        assert len(review.bound_triggers) == 1
        assert review.bound_triggers[0].trigger == trigger
        assert not is_nil(review.bound_triggers[0].id)

    def test_duplicate_trigger_is_rejected(self, valid_review, trigger):
        review = valid_review.bind_trigger(ReviewTrigger(trigger=trigger, why="a"))

        with pytest.raises(DuplicateBindingError):
            review.bind_trigger(ReviewTrigger(trigger=trigger, why="b"))


