"""Integration tests for NotificationDispatcher."""

from uuid import uuid4

import pytest

from campusgig.application.services.sync_keys import SyncKeys
from campusgig.domain.exceptions import NotFoundError, UnauthorizedError
from campusgig.domain.value_objects.notification_type import NotificationType


class RecordingTarget:
    def __init__(self):
        self.patterns = []

    def invalidate(self, *patterns):
        self.patterns.extend(patterns)
        return len(patterns)


@pytest.mark.integration
class TestNotificationDispatcher:
    async def test_notify_standalone_commits_and_invalidates(
        self, notifications, invalidator, helper
    ):
        target = RecordingTarget()
        invalidator.register(target)
        ref_id = uuid4()

        created = await notifications.notify(
            helper.id, NotificationType.JOB_ASSIGNED, ref_id
        )

        assert created.is_read is False
        assert await notifications.unread_count(helper.id) == 1
        assert SyncKeys.unread(helper.id) in target.patterns

    async def test_list_is_newest_first(self, notifications, helper):
        first = await notifications.notify(
            helper.id, NotificationType.JOB_ASSIGNED, uuid4()
        )
        second = await notifications.notify(
            helper.id, NotificationType.JOB_COMPLETED, uuid4()
        )

        listed = await notifications.list_for_user(helper.id)

        assert [n.id for n in listed] == [second.id, first.id]

    async def test_mark_read(self, notifications, helper):
        created = await notifications.notify(
            helper.id, NotificationType.RATING_RECEIVED, uuid4()
        )

        read = await notifications.mark_read(created.id, helper.id)

        assert read.is_read is True
        assert await notifications.unread_count(helper.id) == 0
        assert await notifications.list_for_user(helper.id, unread_only=True) == []

    async def test_mark_read_is_idempotent(self, notifications, helper):
        created = await notifications.notify(
            helper.id, NotificationType.JOB_ASSIGNED, uuid4()
        )
        await notifications.mark_read(created.id, helper.id)

        again = await notifications.mark_read(created.id, helper.id)

        assert again.is_read is True

    async def test_only_recipient_marks_read(self, notifications, helper, poster):
        created = await notifications.notify(
            helper.id, NotificationType.JOB_ASSIGNED, uuid4()
        )

        with pytest.raises(UnauthorizedError):
            await notifications.mark_read(created.id, poster.id)

        assert await notifications.unread_count(helper.id) == 1

    async def test_mark_missing_notification(self, notifications, helper):
        with pytest.raises(NotFoundError):
            await notifications.mark_read(uuid4(), helper.id)

    async def test_mark_all_read_only_touches_caller(
        self, notifications, helper, poster
    ):
        for _ in range(3):
            await notifications.notify(
                helper.id, NotificationType.JOB_ASSIGNED, uuid4()
            )
        await notifications.notify(
            poster.id, NotificationType.RATING_RECEIVED, uuid4()
        )

        assert await notifications.mark_all_read(helper.id) == 3
        assert await notifications.mark_all_read(helper.id) == 0
        assert await notifications.unread_count(poster.id) == 1

    async def test_list_respects_limit(self, notifications, helper):
        for _ in range(4):
            await notifications.notify(
                helper.id, NotificationType.JOB_ASSIGNED, uuid4()
            )

        assert len(await notifications.list_for_user(helper.id, limit=2)) == 2
