"""Integration tests for RatingLedger against a real database."""

import asyncio
from uuid import uuid4

import pytest

from campusgig.application.services.job_store import CreateJobRequest
from campusgig.application.services.rating_ledger import CreateRatingRequest
from campusgig.domain.exceptions import (
    DuplicateRatingError,
    InvalidTransitionError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from campusgig.domain.value_objects.notification_type import NotificationType
from campusgig.domain.value_objects.rating_type import RatingType

POSTER_TO_HELPER = RatingType.POSTER_TO_HELPER.value
HELPER_TO_POSTER = RatingType.HELPER_TO_POSTER.value


def poster_rates_helper(job, value=5, review=None):
    return CreateRatingRequest(
        job_id=job.id,
        rater_id=job.poster_id,
        rated_user_id=job.assigned_to,
        rating_type=POSTER_TO_HELPER,
        value=value,
        review=review,
    )


@pytest.mark.integration
class TestCreateRating:
    async def test_records_rating_and_merges_aggregate(
        self, rating_ledger, profile_service, notifications, completed_job, helper
    ):
        rating = await rating_ledger.create_rating(
            poster_rates_helper(completed_job, value=4, review="Quick and careful")
        )

        assert rating.value == 4
        assert rating.review == "Quick and careful"
        assert rating.rating_type == RatingType.POSTER_TO_HELPER

        profile = await profile_service.get_profile(helper.id)
        assert profile.total_ratings == 1
        assert profile.average_rating == pytest.approx(4.0)

        inbox = await notifications.list_for_user(helper.id)
        assert inbox[0].type == NotificationType.RATING_RECEIVED
        assert inbox[0].ref_id == rating.id

    async def test_both_directions_are_independent(
        self, rating_ledger, completed_job, poster, helper
    ):
        await rating_ledger.create_rating(poster_rates_helper(completed_job))
        await rating_ledger.create_rating(
            CreateRatingRequest(
                job_id=completed_job.id,
                rater_id=helper.id,
                rated_user_id=poster.id,
                rating_type=HELPER_TO_POSTER,
                value=3,
            )
        )

        poster_stats = await rating_ledger.get_rating_stats(poster.id)
        helper_stats = await rating_ledger.get_rating_stats(helper.id)
        assert poster_stats.total_ratings == 1
        assert poster_stats.average_rating == 3.0
        assert helper_stats.average_rating == 5.0
        assert helper_stats.tasks_completed == 1

    async def test_duplicate_direction_is_rejected(
        self, rating_ledger, profile_service, completed_job, helper
    ):
        await rating_ledger.create_rating(poster_rates_helper(completed_job, value=5))

        with pytest.raises(DuplicateRatingError):
            await rating_ledger.create_rating(
                poster_rates_helper(completed_job, value=1)
            )

        profile = await profile_service.get_profile(helper.id)
        assert profile.total_ratings == 1
        assert profile.average_rating == pytest.approx(5.0)

    async def test_job_must_be_completed(self, rating_ledger, in_progress_job):
        with pytest.raises(InvalidTransitionError):
            await rating_ledger.create_rating(poster_rates_helper(in_progress_job))

    async def test_missing_job(self, rating_ledger, poster, helper):
        with pytest.raises(NotFoundError):
            await rating_ledger.create_rating(
                CreateRatingRequest(
                    job_id=uuid4(),
                    rater_id=poster.id,
                    rated_user_id=helper.id,
                    rating_type=POSTER_TO_HELPER,
                    value=5,
                )
            )

    async def test_wrong_direction_for_rater(
        self, rating_ledger, completed_job, poster, helper
    ):
        with pytest.raises(UnauthorizedError):
            await rating_ledger.create_rating(
                CreateRatingRequest(
                    job_id=completed_job.id,
                    rater_id=helper.id,
                    rated_user_id=poster.id,
                    rating_type=POSTER_TO_HELPER,
                    value=5,
                )
            )

    async def test_outsider_cannot_rate(
        self, rating_ledger, completed_job, helper, make_profile
    ):
        outsider = await make_profile("Outsider")

        with pytest.raises(UnauthorizedError):
            await rating_ledger.create_rating(
                CreateRatingRequest(
                    job_id=completed_job.id,
                    rater_id=outsider.id,
                    rated_user_id=helper.id,
                    rating_type=POSTER_TO_HELPER,
                    value=5,
                )
            )

    @pytest.mark.parametrize("value", [0, 6, 3.5, True])
    async def test_invalid_value(self, rating_ledger, completed_job, value):
        with pytest.raises(ValidationError):
            await rating_ledger.create_rating(
                poster_rates_helper(completed_job, value=value)
            )

    async def test_unknown_rating_type(self, rating_ledger, completed_job):
        request = poster_rates_helper(completed_job)
        request.rating_type = "self_review"

        with pytest.raises(ValidationError):
            await rating_ledger.create_rating(request)

    async def test_state_checked_before_value(self, rating_ledger, in_progress_job):
        with pytest.raises(InvalidTransitionError):
            await rating_ledger.create_rating(
                poster_rates_helper(in_progress_job, value=9)
            )

    async def test_missing_profile_rolls_back_rating(
        self, rating_ledger, job_store, notifications, poster, job_request
    ):
        ghost_id = uuid4()
        job = await job_store.create_job(poster.id, job_request)
        await job_store.assign_helper(job.id, ghost_id)
        job = await job_store.complete_job(job.id, poster.id)
        before = await notifications.unread_count(ghost_id)

        with pytest.raises(NotFoundError):
            await rating_ledger.create_rating(poster_rates_helper(job))

        assert await rating_ledger.list_ratings_for_user(ghost_id) == []
        assert await notifications.unread_count(ghost_id) == before


@pytest.mark.integration
class TestAggregate:
    async def test_concurrent_ratings_average_exactly(
        self, rating_ledger, job_store, helper, make_profile
    ):
        values = [5, 4, 3, 5, 2, 4]
        jobs = []
        for index in range(len(values)):
            poster = await make_profile(f"Poster {index}")
            job = await job_store.create_job(
                poster.id, CreateJobRequest(title=f"Errand {index}", price=300)
            )
            await job_store.assign_helper(job.id, helper.id)
            jobs.append(await job_store.complete_job(job.id, poster.id))

        await asyncio.gather(
            *(
                rating_ledger.create_rating(poster_rates_helper(job, value=value))
                for job, value in zip(jobs, values)
            )
        )

        stats = await rating_ledger.get_rating_stats(helper.id)
        assert stats.total_ratings == len(values)
        assert stats.average_rating == round(sum(values) / len(values), 1)
        assert stats.tasks_completed == len(values)

    async def test_stats_for_user_without_profile(self, rating_ledger):
        stats = await rating_ledger.get_rating_stats(uuid4())

        assert stats.average_rating == 0.0
        assert stats.total_ratings == 0
        assert stats.tasks_completed == 0

    async def test_rated_job_ids(self, rating_ledger, completed_job, poster):
        await rating_ledger.create_rating(poster_rates_helper(completed_job))

        rated = await rating_ledger.rated_job_ids(
            poster.id, RatingType.POSTER_TO_HELPER
        )
        assert rated == {completed_job.id}
        assert (
            await rating_ledger.rated_job_ids(poster.id, RatingType.HELPER_TO_POSTER)
            == set()
        )


@pytest.mark.integration
class TestLifecycleScenario:
    async def test_post_accept_complete_rate(
        self, job_store, rating_ledger, profile_service, poster, helper
    ):
        job = await job_store.create_job(
            poster.id, CreateJobRequest(title="Move furniture", price=2500)
        )
        assert job.status.value == "open"
        assert job.assigned_to is None

        job = await job_store.assign_helper(job.id, helper.id)
        assert job.status.value == "in_progress"
        assert job.assigned_to == helper.id

        job = await job_store.complete_job(job.id, poster.id)
        assert job.status.value == "completed"

        before = (await profile_service.get_profile(helper.id)).total_ratings
        await rating_ledger.create_rating(poster_rates_helper(job, value=5))
        after = (await profile_service.get_profile(helper.id)).total_ratings
        assert after == before + 1

        with pytest.raises(DuplicateRatingError):
            await rating_ledger.create_rating(poster_rates_helper(job, value=4))
