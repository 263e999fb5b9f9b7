"""Integration tests for JobStore against a real database."""

import asyncio
from uuid import uuid4

import pytest
import pytest_asyncio

from campusgig.application.interfaces.repositories import JobSearchCriteria
from campusgig.application.services.job_store import CreateJobRequest
from campusgig.application.services.sync_keys import SyncKeys
from campusgig.domain.exceptions import (
    AlreadyAssignedError,
    InvalidTransitionError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from campusgig.domain.value_objects.job_sort import JobSort
from campusgig.domain.value_objects.job_status import JobStatus
from campusgig.domain.value_objects.notification_type import NotificationType


class RecordingTarget:
    def __init__(self):
        self.patterns = []

    def invalidate(self, *patterns):
        self.patterns.extend(patterns)
        return len(patterns)


@pytest.mark.integration
class TestCreateJob:
    async def test_creates_open_job_with_defaults(self, job_store, poster):
        job = await job_store.create_job(
            poster.id, CreateJobRequest(title="  Print my thesis  ", price=500)
        )

        assert job.status == JobStatus.OPEN
        assert job.title == "Print my thesis"
        assert job.assigned_to is None
        assert job.urgency == "Flexible"
        assert job.location == "Campus"
        assert job.category == "Other"

        stored = await job_store.get_job(job.id)
        assert stored.id == job.id
        assert stored.price == 500

    @pytest.mark.parametrize("price", [0, -100, 12.5, "1500"])
    async def test_rejects_invalid_price(self, job_store, poster, price):
        with pytest.raises(ValidationError):
            await job_store.create_job(
                poster.id, CreateJobRequest(title="Walk my dog", price=price)
            )

    async def test_rejects_blank_title(self, job_store, poster):
        with pytest.raises(ValidationError):
            await job_store.create_job(
                poster.id, CreateJobRequest(title="   ", price=100)
            )

    async def test_publishes_feed_invalidation(
        self, job_store, invalidator, poster, job_request
    ):
        target = RecordingTarget()
        invalidator.register(target)

        await job_store.create_job(poster.id, job_request)

        assert SyncKeys.FEED in target.patterns
        assert SyncKeys.my_jobs(poster.id) in target.patterns


@pytest.mark.integration
class TestAssignHelper:
    async def test_self_accept_notifies_poster(
        self, job_store, notifications, open_job, poster, helper
    ):
        job = await job_store.assign_helper(open_job.id, helper.id)

        assert job.status == JobStatus.IN_PROGRESS
        assert job.assigned_to == helper.id

        inbox = await notifications.list_for_user(poster.id)
        assert [n.type for n in inbox] == [NotificationType.JOB_ASSIGNED]
        assert inbox[0].ref_id == open_job.id
        assert await notifications.unread_count(helper.id) == 0

    async def test_poster_assigns_and_helper_is_notified(
        self, job_store, notifications, open_job, poster, helper
    ):
        job = await job_store.assign_helper(
            open_job.id, helper.id, caller_id=poster.id
        )

        assert job.assigned_to == helper.id

        inbox = await notifications.list_for_user(helper.id)
        assert [n.type for n in inbox] == [NotificationType.JOB_ASSIGNED]
        assert await notifications.unread_count(poster.id) == 0

    async def test_third_party_cannot_assign_someone_else(
        self, job_store, open_job, helper, make_profile
    ):
        stranger = await make_profile("Stranger")

        with pytest.raises(UnauthorizedError):
            await job_store.assign_helper(open_job.id, helper.id, caller_id=stranger.id)

        stored = await job_store.get_job(open_job.id)
        assert stored.status == JobStatus.OPEN

    async def test_assignment_invalidates_recipient_unread(
        self, job_store, invalidator, open_job, poster, helper
    ):
        target = RecordingTarget()
        invalidator.register(target)

        await job_store.assign_helper(open_job.id, helper.id)

        assert SyncKeys.unread(poster.id) in target.patterns
        assert SyncKeys.unread(helper.id) not in target.patterns
        assert SyncKeys.gigs(helper.id) in target.patterns

    async def test_missing_job(self, job_store, helper):
        with pytest.raises(NotFoundError):
            await job_store.assign_helper(uuid4(), helper.id)

    async def test_poster_cannot_accept_own_job(self, job_store, open_job, poster):
        with pytest.raises(ValidationError):
            await job_store.assign_helper(open_job.id, poster.id)

    async def test_second_helper_gets_already_assigned(
        self, job_store, in_progress_job, make_profile
    ):
        latecomer = await make_profile("Latecomer")

        with pytest.raises(AlreadyAssignedError):
            await job_store.assign_helper(in_progress_job.id, latecomer.id)

    async def test_final_job_cannot_be_assigned(
        self, job_store, completed_job, make_profile
    ):
        latecomer = await make_profile("Latecomer")

        with pytest.raises(InvalidTransitionError):
            await job_store.assign_helper(completed_job.id, latecomer.id)

    async def test_final_status_checked_before_poster(
        self, job_store, open_job, poster
    ):
        await job_store.cancel_job(open_job.id, poster.id)

        with pytest.raises(InvalidTransitionError):
            await job_store.assign_helper(open_job.id, poster.id)

    async def test_concurrent_accepts_have_exactly_one_winner(
        self, job_store, notifications, open_job, poster, make_profile
    ):
        helpers = [await make_profile(f"Helper {i}") for i in range(5)]

        results = await asyncio.gather(
            *(job_store.assign_helper(open_job.id, h.id) for h in helpers),
            return_exceptions=True,
        )

        winners = [r for r in results if not isinstance(r, Exception)]
        losers = [r for r in results if isinstance(r, Exception)]
        assert len(winners) == 1
        assert len(losers) == 4
        assert all(isinstance(e, AlreadyAssignedError) for e in losers)

        stored = await job_store.get_job(open_job.id)
        assert stored.assigned_to == winners[0].assigned_to

        assert await notifications.unread_count(poster.id) == 1
        for h in helpers:
            assert await notifications.unread_count(h.id) == 0


@pytest.mark.integration
class TestCompleteJob:
    async def test_completes_and_counts_task(
        self, job_store, profile_service, notifications, in_progress_job, poster, helper
    ):
        job = await job_store.complete_job(in_progress_job.id, poster.id)

        assert job.status == JobStatus.COMPLETED
        assert job.completed_at is not None
        assert job.assigned_to == helper.id

        profile = await profile_service.get_profile(helper.id)
        assert profile.tasks_completed == 1

        inbox = await notifications.list_for_user(helper.id)
        assert inbox[0].type == NotificationType.JOB_COMPLETED

    async def test_only_poster_can_complete(self, job_store, in_progress_job, helper):
        with pytest.raises(UnauthorizedError):
            await job_store.complete_job(in_progress_job.id, helper.id)

    async def test_open_job_cannot_be_completed(self, job_store, open_job, poster):
        with pytest.raises(InvalidTransitionError):
            await job_store.complete_job(open_job.id, poster.id)

    async def test_completed_job_cannot_be_completed_again(
        self, job_store, profile_service, completed_job, poster, helper
    ):
        with pytest.raises(InvalidTransitionError):
            await job_store.complete_job(completed_job.id, poster.id)

        profile = await profile_service.get_profile(helper.id)
        assert profile.tasks_completed == 1


@pytest.mark.integration
class TestCancelJob:
    async def test_cancel_open_job(self, job_store, open_job, poster):
        job = await job_store.cancel_job(open_job.id, poster.id)

        assert job.status == JobStatus.CANCELLED
        assert job.assigned_to is None

    async def test_cancel_clears_assignee_and_notifies_helper(
        self, job_store, notifications, in_progress_job, poster, helper
    ):
        job = await job_store.cancel_job(in_progress_job.id, poster.id)

        assert job.status == JobStatus.CANCELLED
        assert job.assigned_to is None

        types = [n.type for n in await notifications.list_for_user(helper.id)]
        assert NotificationType.JOB_CANCELLED in types

    async def test_only_poster_can_cancel(self, job_store, open_job, helper):
        with pytest.raises(UnauthorizedError):
            await job_store.cancel_job(open_job.id, helper.id)

    async def test_completed_job_cannot_be_cancelled(
        self, job_store, completed_job, poster
    ):
        with pytest.raises(InvalidTransitionError):
            await job_store.cancel_job(completed_job.id, poster.id)

        stored = await job_store.get_job(completed_job.id)
        assert stored.status == JobStatus.COMPLETED
        assert stored.assigned_to == completed_job.assigned_to

    async def test_cancel_racing_accept_leaves_consistent_job(
        self, job_store, open_job, poster, helper
    ):
        await asyncio.gather(
            job_store.cancel_job(open_job.id, poster.id),
            job_store.assign_helper(open_job.id, helper.id),
            return_exceptions=True,
        )

        stored = await job_store.get_job(open_job.id)
        assert stored.status in (JobStatus.CANCELLED, JobStatus.IN_PROGRESS)
        assert (stored.assigned_to is not None) == stored.status.requires_assignee()


@pytest.mark.integration
class TestDeleteJob:
    async def test_poster_deletes_open_job(
        self, job_store, invalidator, open_job, poster
    ):
        target = RecordingTarget()
        invalidator.register(target)

        await job_store.delete_job(open_job.id, poster.id)

        with pytest.raises(NotFoundError):
            await job_store.get_job(open_job.id)
        assert await job_store.list_posted_by(poster.id) == []
        assert SyncKeys.FEED in target.patterns
        assert SyncKeys.my_jobs(poster.id) in target.patterns

    async def test_cancelled_job_can_be_deleted(
        self, job_store, in_progress_job, poster, helper
    ):
        await job_store.cancel_job(in_progress_job.id, poster.id)

        await job_store.delete_job(in_progress_job.id, poster.id)

        assert await job_store.list_assigned_to(helper.id) == []

    async def test_only_poster_can_delete(self, job_store, open_job, helper):
        with pytest.raises(UnauthorizedError):
            await job_store.delete_job(open_job.id, helper.id)

        assert (await job_store.get_job(open_job.id)).status == JobStatus.OPEN

    async def test_in_progress_job_must_be_cancelled_first(
        self, job_store, in_progress_job, poster
    ):
        with pytest.raises(InvalidTransitionError):
            await job_store.delete_job(in_progress_job.id, poster.id)

        stored = await job_store.get_job(in_progress_job.id)
        assert stored.status == JobStatus.IN_PROGRESS

    async def test_completed_job_is_kept(self, job_store, completed_job, poster):
        with pytest.raises(InvalidTransitionError):
            await job_store.delete_job(completed_job.id, poster.id)

        assert (await job_store.get_job(completed_job.id)).status == (
            JobStatus.COMPLETED
        )

    async def test_missing_or_already_deleted_job(self, job_store, open_job, poster):
        await job_store.delete_job(open_job.id, poster.id)

        with pytest.raises(NotFoundError):
            await job_store.delete_job(open_job.id, poster.id)
        with pytest.raises(NotFoundError):
            await job_store.delete_job(uuid4(), poster.id)

    async def test_deleted_job_cannot_be_accepted(
        self, job_store, open_job, poster, helper
    ):
        await job_store.delete_job(open_job.id, poster.id)

        with pytest.raises(NotFoundError):
            await job_store.assign_helper(open_job.id, helper.id)


@pytest.mark.integration
class TestJobReads:
    async def test_feed_holds_open_and_in_progress_jobs(
        self, job_store, poster, helper, job_request
    ):
        first = await job_store.create_job(poster.id, job_request)
        second = await job_store.create_job(poster.id, job_request)
        third = await job_store.create_job(poster.id, job_request)
        await job_store.assign_helper(second.id, helper.id)
        await job_store.cancel_job(third.id, poster.id)

        feed_ids = [job.id for job in await job_store.list_feed()]

        assert set(feed_ids) == {first.id, second.id}

    async def test_posted_and_assigned_lists(
        self, job_store, in_progress_job, poster, helper
    ):
        posted = await job_store.list_posted_by(poster.id)
        assigned = await job_store.list_assigned_to(helper.id)

        assert [job.id for job in posted] == [in_progress_job.id]
        assert [job.id for job in assigned] == [in_progress_job.id]
        assert await job_store.list_assigned_to(poster.id) == []

    async def test_get_missing_job(self, job_store):
        with pytest.raises(NotFoundError):
            await job_store.get_job(uuid4())


@pytest.mark.integration
class TestSearchJobs:
    @pytest_asyncio.fixture
    async def catalog(self, job_store, poster):
        specs = [
            ("Move a sofa", 4000, "Moving", "This week"),
            ("Calculus tutoring", 2500, "Tutoring", "ASAP"),
            ("Pick up groceries", 800, "Errands", "Today"),
        ]
        jobs = []
        for title, price, category, urgency in specs:
            jobs.append(
                await job_store.create_job(
                    poster.id,
                    CreateJobRequest(
                        title=title, price=price, category=category, urgency=urgency
                    ),
                )
            )
        return jobs

    async def test_sort_by_price(self, job_store, catalog):
        jobs = await job_store.search_jobs(
            JobSearchCriteria(sort_by=JobSort.PRICE_LOW)
        )

        assert [job.price for job in jobs] == [800, 2500, 4000]

    async def test_sort_by_urgency(self, job_store, catalog):
        jobs = await job_store.search_jobs(JobSearchCriteria(sort_by=JobSort.URGENCY))

        assert [job.urgency for job in jobs] == ["ASAP", "Today", "This week"]

    async def test_text_query_is_case_insensitive(self, job_store, catalog):
        jobs = await job_store.search_jobs(JobSearchCriteria(query="CALCULUS"))

        assert [job.title for job in jobs] == ["Calculus tutoring"]

    async def test_price_range_and_category(self, job_store, catalog):
        jobs = await job_store.search_jobs(
            JobSearchCriteria(min_price=1000, max_price=5000, category="Moving")
        )

        assert [job.title for job in jobs] == ["Move a sofa"]

    async def test_inverted_price_range(self, job_store):
        with pytest.raises(ValidationError):
            await job_store.search_jobs(JobSearchCriteria(min_price=10, max_price=5))

    async def test_defaults_to_open_jobs(self, job_store, catalog, helper):
        await job_store.assign_helper(catalog[0].id, helper.id)

        jobs = await job_store.search_jobs(JobSearchCriteria())

        assert catalog[0].id not in [job.id for job in jobs]
        assert len(jobs) == 2
