"""Unit tests for the publication lifecycle."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from artibrain.kernel.errors import FORBIDDEN, INVALID_STATE_REQUEST, is_failure
from artibrain.kernel.identity.principal import Principal
from artibrain.kernel.models.post import PostStatus
from artibrain.kernel.models.user import UserRole
from artibrain.orchestration.publication import (
    ContentItem,
    as_utc,
    initial_item,
    is_publicly_visible,
    parse_status,
    transition,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
U1 = uuid.uuid4()
U2 = uuid.uuid4()

AUTHOR_U1 = Principal(id=U1, name="Alice", role=UserRole.AUTHOR)
AUTHOR_U2 = Principal(id=U2, name="Bob", role=UserRole.AUTHOR)
EDITOR = Principal(id=uuid.uuid4(), name="Eddie", role=UserRole.EDITOR)
READER = Principal(id=uuid.uuid4(), name="Rita", role=UserRole.READER)


def draft(author_id=U1) -> ContentItem:
    return ContentItem(id=uuid.uuid4(), author_id=author_id, status=PostStatus.DRAFT)


class TestTransition:
    def test_editor_publishing_stamps_now(self):
        result = transition(draft(), "PUBLISHED", EDITOR, now=NOW)
        
        assert result.status == PostStatus.PUBLISHED
        assert result.published_at == NOW
        assert is_publicly_visible(result, NOW)
    
    def test_author_may_publish_own_post(self):
        result = transition(draft(U1), PostStatus.PUBLISHED, AUTHOR_U1, now=NOW)
        
        assert result.status == PostStatus.PUBLISHED
    
    def test_author_cannot_touch_someone_elses_post(self):
        assert transition(draft(U2), "PUBLISHED", AUTHOR_U1, now=NOW) is FORBIDDEN
    
    def test_reader_and_anonymous_are_forbidden(self):
        assert transition(draft(), "PUBLISHED", READER, now=NOW) is FORBIDDEN
        assert transition(draft(), "PUBLISHED", None, now=NOW) is FORBIDDEN
    
    @pytest.mark.parametrize("bad", ["ARCHIVED", "", "  ", None, 3])
    def test_unknown_status_is_invalid(self, bad):
        assert transition(draft(), bad, EDITOR, now=NOW) is INVALID_STATE_REQUEST
    
    def test_invalid_status_is_reported_before_permission(self):
        assert transition(draft(U2), "ARCHIVED", AUTHOR_U1, now=NOW) is INVALID_STATE_REQUEST
    
    def test_status_is_case_insensitive(self):
        assert transition(draft(), " published ", EDITOR, now=NOW).status == PostStatus.PUBLISHED
    
    def test_same_status_is_a_no_op(self):
        item = draft()
        
        assert transition(item, "DRAFT", EDITOR, now=NOW) is item
    
    def test_republishing_keeps_original_date(self):
        first = transition(draft(), "PUBLISHED", EDITOR, now=NOW)
        again = transition(first, "PUBLISHED", EDITOR, now=NOW + timedelta(days=3))
        
        assert again is first
    
    def test_back_to_draft_clears_publication_time(self):
        published = transition(draft(), "PUBLISHED", EDITOR, now=NOW)
        result = transition(published, "DRAFT", EDITOR, now=NOW)
        
        assert result.status == PostStatus.DRAFT
        assert result.published_at is None
        assert not is_publicly_visible(result, NOW)
    
    def test_republishing_after_draft_stamps_new_time(self):
        """Drafting drops the date, so publishing again stamps a new one."""
        published = transition(draft(), "PUBLISHED", EDITOR, now=NOW)
        drafted = transition(published, "DRAFT", EDITOR, now=NOW)
        later = NOW + timedelta(days=1)
        
        assert transition(drafted, "PUBLISHED", EDITOR, now=later).published_at == later
    
    def test_scheduling_needs_a_future_time(self):
        assert transition(draft(), "SCHEDULED", EDITOR, now=NOW) is INVALID_STATE_REQUEST
        assert transition(draft(), "SCHEDULED", EDITOR, now=NOW, publish_at=NOW) is INVALID_STATE_REQUEST
        past = NOW - timedelta(hours=1)
        assert transition(draft(), "SCHEDULED", EDITOR, now=NOW, publish_at=past) is INVALID_STATE_REQUEST
    
    @pytest.mark.parametrize("target", ["DRAFT", "PUBLISHED"])
    def test_publish_time_only_goes_with_scheduling(self, target):
        at = NOW + timedelta(days=2)

        assert transition(draft(), target, EDITOR, now=NOW, publish_at=at) is INVALID_STATE_REQUEST

    def test_scheduling_sets_publish_time(self):
        at = NOW + timedelta(days=2)
        result = transition(draft(), "SCHEDULED", EDITOR, now=NOW, publish_at=at)
        
        assert result.status == PostStatus.SCHEDULED
        assert result.published_at == at
    
    def test_rescheduling_moves_the_time(self):
        first = transition(draft(), "SCHEDULED", EDITOR, now=NOW, publish_at=NOW + timedelta(days=1))
        moved = transition(first, "SCHEDULED", EDITOR, now=NOW, publish_at=NOW + timedelta(days=5))
        
        assert moved.published_at == NOW + timedelta(days=5)
    
    def test_publishing_a_scheduled_post_uses_now(self):
        scheduled = transition(draft(), "SCHEDULED", EDITOR, now=NOW, publish_at=NOW + timedelta(days=1))
        published = transition(scheduled, "PUBLISHED", EDITOR, now=NOW)
        
        assert published.published_at == NOW
    
    def test_naive_times_are_utc(self):
        at = datetime(2026, 3, 2, 12, 0)
        result = transition(draft(), "SCHEDULED", EDITOR, now=NOW, publish_at=at)
        
        assert result.published_at == at.replace(tzinfo=timezone.utc)
    
    def test_transition_does_not_mutate_input(self):
        item = draft()
        transition(item, "PUBLISHED", EDITOR, now=NOW)
        
        assert item.status == PostStatus.DRAFT
        assert item.published_at is None


class TestVisibility:
    def test_scheduled_post_stays_hidden_after_its_time(self):
        item = ContentItem(
            id=uuid.uuid4(),
            author_id=U1,
            status=PostStatus.SCHEDULED,
            published_at=NOW - timedelta(days=1),
        )
        
        assert not is_publicly_visible(item, NOW)
    
    def test_published_with_future_time_is_hidden(self):
        item = ContentItem(id=None, author_id=U1, status=PostStatus.PUBLISHED, published_at=NOW + timedelta(minutes=1))
        
        assert not is_publicly_visible(item, NOW)
        assert is_publicly_visible(item, NOW + timedelta(minutes=1))
    
    def test_published_without_time_is_hidden(self):
        item = ContentItem(id=None, author_id=U1, status=PostStatus.PUBLISHED, published_at=None)
        
        assert not is_publicly_visible(item, NOW)
    
    def test_drafts_are_hidden(self):
        assert not is_publicly_visible(initial_item(U1), NOW)


class TestHelpers:
    def test_initial_item_is_a_draft(self):
        item = initial_item(U1)
        
        assert item.status == PostStatus.DRAFT
        assert item.published_at is None
        assert item.author_id == U1
    
    def test_parse_status(self):
        assert parse_status("scheduled") == PostStatus.SCHEDULED
        assert parse_status(PostStatus.DRAFT) == PostStatus.DRAFT
        assert parse_status("nope") is None
        assert parse_status(None) is None
    
    def test_as_utc_converts_offsets(self):
        plus_two = timezone(timedelta(hours=2))
        value = datetime(2026, 3, 1, 14, 0, tzinfo=plus_two)
        
        assert as_utc(value) == NOW
        assert as_utc(value).tzinfo == timezone.utc
        assert as_utc(None) is None
    
    def test_failures_are_values(self):
        assert is_failure(FORBIDDEN)
        assert not is_failure(draft())
