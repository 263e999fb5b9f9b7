#!/usr/bin/env python3
"""
Seed database with demo marketplace data for development.
"""

import asyncio
from uuid import uuid4

from sqlalchemy import func, select

from campusgig.application.services.job_store import CreateJobRequest, JobStore
from campusgig.application.services.notification_dispatcher import (
    NotificationDispatcher,
)
from campusgig.application.services.profile_service import ProfileService
from campusgig.application.services.rating_ledger import (
    CreateRatingRequest,
    RatingLedger,
)
from campusgig.config.logging import configure_logging, get_logger
from campusgig.config.settings import settings
from campusgig.domain.value_objects.rating_type import RatingType
from campusgig.infrastructure.database.connection import Database
from campusgig.infrastructure.database.models.profile import ProfileModel

logger = get_logger(__name__)

STUDENTS = [
    ("s2101001@campus.example.edu", "Amara"),
    ("s2101002@campus.example.edu", "Ben"),
    ("s2101003@campus.example.edu", None),
    ("s2101004@campus.example.edu", "Chen"),
]

JOBS = [
    ("Carry a mini fridge to Hall C", 2500, "Moving", "Today", "Hall C"),
    ("Linear algebra exam prep", 4000, "Tutoring", "3 days", "Library"),
    ("Pick up a parcel from the mail room", 500, "Errands", "ASAP", "Mail Room"),
    ("Fix my bike's flat tyre", 1500, "Repairs", "This week", "North Campus"),
    ("Print and bind my dissertation", 1200, "Errands", "Today", "Print Shop"),
]


async def has_data(database: Database) -> bool:
    async with database.session() as session:
        result = await session.execute(select(func.count(ProfileModel.id)))
        return result.scalar_one() > 0


async def seed_database():
    """Seed database with demo profiles, jobs, ratings and notifications."""
    database = Database.from_settings(settings)
    try:
        if settings.DATABASE_CREATE_TABLES:
            await database.create_all()

        if await has_data(database):
            logger.info("Database already has data, skipping seed")
            return

        notifications = NotificationDispatcher(database)
        profiles = ProfileService(database)
        job_store = JobStore(database, notifications)
        ledger = RatingLedger(database, notifications)

        logger.info("Creating student profiles")
        students = [
            await profiles.ensure_profile(uuid4(), email, name)
            for email, name in STUDENTS
        ]
        poster, *helpers = students

        logger.info("Posting jobs")
        jobs = []
        for title, price, category, urgency, location in JOBS:
            jobs.append(
                await job_store.create_job(
                    poster.id,
                    CreateJobRequest(
                        title=title,
                        price=price,
                        category=category,
                        urgency=urgency,
                        location=location,
                    ),
                )
            )

        # One job per lifecycle state, plus two left open
        await job_store.assign_helper(jobs[0].id, helpers[0].id)
        await job_store.complete_job(jobs[0].id, poster.id)
        await job_store.assign_helper(jobs[1].id, helpers[1].id, caller_id=poster.id)
        await job_store.cancel_job(jobs[2].id, poster.id)

        logger.info("Recording ratings")
        await ledger.create_rating(
            CreateRatingRequest(
                job_id=jobs[0].id,
                rater_id=poster.id,
                rated_user_id=helpers[0].id,
                rating_type=RatingType.POSTER_TO_HELPER.value,
                value=5,
                review="Fast and careful on the stairs",
            )
        )
        await ledger.create_rating(
            CreateRatingRequest(
                job_id=jobs[0].id,
                rater_id=helpers[0].id,
                rated_user_id=poster.id,
                rating_type=RatingType.HELPER_TO_POSTER.value,
                value=4,
            )
        )

        logger.info(
            "Database seeded",
            profiles=len(students),
            jobs=len(jobs),
            poster_id=str(poster.id),
        )
    finally:
        await database.dispose()


if __name__ == "__main__":
    configure_logging(settings)
    asyncio.run(seed_database())
