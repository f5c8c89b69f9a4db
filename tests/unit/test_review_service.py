"""
Unit tests for the store review tracker.
"""

from app.services.review_service import (
    PendingPromptRequester, request_review_if_appropriate, reset_review_state,
    should_request_review, track_event_completed_for_review
)
from app.services.storage_service import STORAGE_KEYS


class RecordingRequester:
    """Requester that records calls instead of showing a prompt."""

    def __init__(self, available=True, fail=False):
        self.available = available
        self.fail = fail
        self.calls = 0

    def is_available(self):
        return self.available

    def request_review(self):
        if self.fail:
            raise RuntimeError('store unavailable')
        self.calls += 1


class RecordingScheduler:
    def __init__(self):
        self.scheduled = []

    def __call__(self, delay, fn):
        self.scheduled.append((delay, fn))

    def run_all(self):
        for _, fn in self.scheduled:
            fn()


class TestRequestReview:
    """Tests for request_review_if_appropriate."""

    def test_requests_only_once(self, storage, now):
        requester = RecordingRequester()

        assert request_review_if_appropriate(storage, requester, now=now) is True
        assert request_review_if_appropriate(storage, requester, now=now) is False

        assert requester.calls == 1
        assert storage.get_string(STORAGE_KEYS['REVIEW_REQUEST_DATE']) == '2024-06-15T12:00:00.000Z'
        assert should_request_review(storage) is False

    def test_unavailable_requester_does_not_mark(self, storage):
        requester = RecordingRequester(available=False)

        assert request_review_if_appropriate(storage, requester) is False
        assert should_request_review(storage) is True

    def test_requester_failure_is_swallowed(self, storage):
        requester = RecordingRequester(fail=True)

        assert request_review_if_appropriate(storage, requester) is False
        assert should_request_review(storage) is True


class TestTrackCompleted:
    """Tests for track_event_completed_for_review."""

    def test_first_completion_schedules_request(self, storage):
        requester = RecordingRequester()
        scheduler = RecordingScheduler()

        count = track_event_completed_for_review(storage, requester, schedule=scheduler, delay=2)

        assert count == 1
        assert scheduler.scheduled[0][0] == 2
        assert requester.calls == 0

        scheduler.run_all()
        assert requester.calls == 1

    def test_later_completions_only_count(self, storage):
        requester = RecordingRequester()
        scheduler = RecordingScheduler()

        track_event_completed_for_review(storage, requester, schedule=scheduler)
        count = track_event_completed_for_review(storage, requester, schedule=scheduler)

        assert count == 2
        assert len(scheduler.scheduled) == 1
        assert storage.get_number(STORAGE_KEYS['COMPLETED_EVENTS_COUNT']) == 2

    def test_zero_delay_runs_inline(self, storage):
        requester = RecordingRequester()

        track_event_completed_for_review(storage, requester, delay=0)

        assert requester.calls == 1

    def test_reset_review_state(self, storage):
        requester = RecordingRequester()
        track_event_completed_for_review(storage, requester, delay=0)

        reset_review_state(storage)

        assert should_request_review(storage) is True
        assert storage.get_number(STORAGE_KEYS['COMPLETED_EVENTS_COUNT']) is None


class TestPendingPromptRequester:
    """Tests for the storage-backed requester used by the API."""

    def test_pending_flag_lifecycle(self, storage):
        requester = PendingPromptRequester(storage)
        assert requester.is_pending() is False

        request_review_if_appropriate(storage, requester)
        assert requester.is_pending() is True

        requester.acknowledge()
        assert requester.is_pending() is False
