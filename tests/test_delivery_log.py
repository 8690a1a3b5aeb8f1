"""Tests for the delivery status state machine and DeliveryLog."""

from __future__ import annotations

import pytest

from herald.core.errors import InvalidTransitionError, ValidationError
from herald.core.types import DELIVERY_TRANSITIONS, DeliveryStatus, NotificationChannel
from herald.notifications.models import DeliveryLog

from tests.conftest import make_notification


class TestDeliveryStatus:
    def test_terminal_states(self) -> None:
        assert DeliveryStatus.FAILED.is_terminal
        assert DeliveryStatus.CLICKED.is_terminal
        assert not DeliveryStatus.SENT.is_terminal

    def test_only_failed_is_unsuccessful(self) -> None:
        assert [s for s in DeliveryStatus if not s.is_successful] == [DeliveryStatus.FAILED]

    def test_transition_table_covers_every_status(self) -> None:
        assert set(DELIVERY_TRANSITIONS) == set(DeliveryStatus)

    def test_allowed_edges(self) -> None:
        assert DeliveryStatus.SENT.can_transition_to(DeliveryStatus.DELIVERED)
        assert DeliveryStatus.SENT.can_transition_to(DeliveryStatus.FAILED)
        assert not DeliveryStatus.SENT.can_transition_to(DeliveryStatus.OPENED)
        assert not DeliveryStatus.FAILED.can_transition_to(DeliveryStatus.SENT)


class TestDeliveryLogStart:
    def test_start_sent(self) -> None:
        log = DeliveryLog.start("n1", NotificationChannel.IN_APP, DeliveryStatus.SENT)
        assert log.status == DeliveryStatus.SENT
        assert log.sent_at is not None
        assert log.attempts == 1
        assert log.failed_at is None

    def test_start_failed_keeps_reason(self) -> None:
        log = DeliveryLog.start(
            "n1", NotificationChannel.IN_APP, DeliveryStatus.FAILED, "Recipient in DND"
        )
        assert log.failed_at is not None
        assert log.sent_at is None
        assert log.error_message == "Recipient in DND"

    def test_start_delivered_implies_sent(self) -> None:
        log = DeliveryLog.start("n1", NotificationChannel.IN_APP, DeliveryStatus.DELIVERED)
        assert log.sent_at is not None
        assert log.delivered_at is not None

    def test_cannot_start_opened(self) -> None:
        with pytest.raises(InvalidTransitionError):
            DeliveryLog.start("n1", NotificationChannel.IN_APP, DeliveryStatus.OPENED)


class TestDeliveryLogTransitions:
    def setup_method(self) -> None:
        self.log = DeliveryLog.start(
            make_notification().id, NotificationChannel.IN_APP, DeliveryStatus.SENT
        )

    def test_transition_increments_attempts(self) -> None:
        self.log.transition_to(DeliveryStatus.DELIVERED)
        assert self.log.status == DeliveryStatus.DELIVERED
        assert self.log.attempts == 2
        assert self.log.delivered_at is not None

    def test_invalid_transition_raises(self) -> None:
        with pytest.raises(InvalidTransitionError):
            self.log.transition_to(DeliveryStatus.CLICKED)
        assert self.log.status == DeliveryStatus.SENT

    def test_failed_is_terminal(self) -> None:
        self.log.transition_to(DeliveryStatus.FAILED, "timeout")
        assert self.log.error_message == "timeout"
        with pytest.raises(InvalidTransitionError):
            self.log.transition_to(DeliveryStatus.DELIVERED)

    def test_timestamps_never_cleared(self) -> None:
        sent_at = self.log.sent_at
        self.log.transition_to(DeliveryStatus.DELIVERED)
        self.log.transition_to(DeliveryStatus.OPENED)
        assert self.log.sent_at == sent_at
        assert self.log.delivered_at is not None
        assert self.log.opened_at is not None

    def test_advance_to_clicked_walks_path(self) -> None:
        assert self.log.advance_to(DeliveryStatus.CLICKED)
        assert self.log.status == DeliveryStatus.CLICKED
        assert self.log.delivered_at is not None
        assert self.log.opened_at is not None
        assert self.log.clicked_at is not None

    def test_advance_is_idempotent(self) -> None:
        assert self.log.advance_to(DeliveryStatus.OPENED)
        assert not self.log.advance_to(DeliveryStatus.OPENED)
        assert not self.log.advance_to(DeliveryStatus.DELIVERED)

    def test_advance_skips_failed_logs(self) -> None:
        self.log.transition_to(DeliveryStatus.FAILED)
        assert not self.log.advance_to(DeliveryStatus.OPENED)
        assert self.log.status == DeliveryStatus.FAILED

    def test_advance_rejects_failed_target(self) -> None:
        with pytest.raises(ValidationError):
            self.log.advance_to(DeliveryStatus.FAILED)

    def test_engagement_does_not_count_attempts(self) -> None:
        self.log.advance_to(DeliveryStatus.OPENED)
        self.log.advance_to(DeliveryStatus.CLICKED)
        assert self.log.status == DeliveryStatus.CLICKED
        assert self.log.attempts == 1

    def test_explicit_transition_then_engagement(self) -> None:
        self.log.transition_to(DeliveryStatus.DELIVERED)
        self.log.advance_to(DeliveryStatus.CLICKED)
        assert self.log.attempts == 2


class TestNotificationMarkRead:
    def test_first_read_sets_timestamp(self) -> None:
        n = make_notification()
        assert n.mark_read()
        assert n.is_read
        assert n.read_at is not None

    def test_second_read_is_noop(self) -> None:
        n = make_notification()
        n.mark_read()
        first = n.read_at
        assert not n.mark_read()
        assert n.read_at == first
