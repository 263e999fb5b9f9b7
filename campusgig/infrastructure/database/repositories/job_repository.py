"""Job repository implementation."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, case, delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from campusgig.application.interfaces.repositories import (
    UNCHANGED,
    JobRepositoryInterface,
    JobSearchCriteria,
)
from campusgig.config.logging import get_logger
from campusgig.domain.entities.job import Job
from campusgig.domain.value_objects.job_sort import (
    DEFAULT_URGENCY_RANK,
    URGENCY_RANK,
    JobSort,
)
from campusgig.domain.value_objects.job_status import JobStatus
from campusgig.infrastructure.database.models.base import as_utc, utcnow
from campusgig.infrastructure.database.models.job import JobModel

logger = get_logger(__name__)


class JobRepository(JobRepositoryInterface):
    """Job repository implementation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, job_id: UUID) -> Optional[Job]:
        """Get job by ID."""
        stmt = (
            select(JobModel)
            .where(JobModel.id == job_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        model = result.scalar_one_or_none()

        return self._model_to_entity(model) if model else None

    async def create(self, job: Job) -> Job:
        """Create a new job."""
        job_model = JobModel(
            id=job.id,
            poster_id=job.poster_id,
            assigned_to=job.assigned_to,
            title=job.title,
            description=job.description,
            price=job.price,
            urgency=job.urgency,
            location=job.location,
            category=job.category,
            status=job.status.value,
            created_at=job.created_at,
            updated_at=job.updated_at,
        )

        self.db.add(job_model)
        # Flush only; the caller's transaction commits
        await self.db.flush()

        return self._model_to_entity(job_model)

    async def transition(
        self,
        job_id: UUID,
        expected: JobStatus,
        target: JobStatus,
        *,
        assigned_to=UNCHANGED,
        completed_at: Optional[datetime] = None,
    ) -> bool:
        """Compare-and-swap the job status."""
        values = {"status": target.value, "updated_at": utcnow()}
        if assigned_to is not UNCHANGED:
            values["assigned_to"] = assigned_to
        if completed_at is not None:
            values["completed_at"] = completed_at

        stmt = (
            update(JobModel)
            .where(
                and_(
                    JobModel.id == job_id,
                    JobModel.status == expected.value,
                )
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        swapped = result.rowcount == 1

        logger.debug(
            "Job status compare-and-swap",
            job_id=str(job_id),
            expected=expected.value,
            target=target.value,
            swapped=swapped,
        )
        return swapped

    async def delete_in_statuses(
        self, job_id: UUID, statuses: List[JobStatus]
    ) -> bool:
        """Delete the job only while its stored status is one of ``statuses``."""
        stmt = (
            delete(JobModel)
            .where(
                and_(
                    JobModel.id == job_id,
                    JobModel.status.in_([status.value for status in statuses]),
                )
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        deleted = result.rowcount == 1

        logger.debug("Job conditional delete", job_id=str(job_id), deleted=deleted)
        return deleted

    async def list_by_statuses(
        self, statuses: List[JobStatus], limit: int = 100
    ) -> List[Job]:
        """List jobs in any of the given statuses, newest first."""
        stmt = (
            select(JobModel)
            .where(JobModel.status.in_([status.value for status in statuses]))
            .order_by(JobModel.created_at.desc())
            .limit(limit)
        )
        return await self._fetch(stmt)

    async def list_by_poster(self, poster_id: UUID) -> List[Job]:
        """List jobs posted by a user, newest first."""
        stmt = (
            select(JobModel)
            .where(JobModel.poster_id == poster_id)
            .order_by(JobModel.created_at.desc())
        )
        return await self._fetch(stmt)

    async def list_by_assignee(self, helper_id: UUID) -> List[Job]:
        """List jobs assigned to a user, newest first."""
        stmt = (
            select(JobModel)
            .where(JobModel.assigned_to == helper_id)
            .order_by(JobModel.created_at.desc())
        )
        return await self._fetch(stmt)

    async def search(self, criteria: JobSearchCriteria) -> List[Job]:
        """Search jobs with filters and ordering."""
        conditions = []

        if criteria.status is not None:
            conditions.append(JobModel.status == criteria.status.value)
        if criteria.query and criteria.query.strip():
            needle = criteria.query.strip().lower()
            conditions.append(
                or_(
                    func.lower(JobModel.title).contains(needle, autoescape=True),
                    func.lower(JobModel.description).contains(needle, autoescape=True),
                )
            )
        if criteria.category:
            conditions.append(JobModel.category == criteria.category)
        if criteria.urgency:
            conditions.append(JobModel.urgency == criteria.urgency)
        if criteria.location:
            conditions.append(JobModel.location == criteria.location)
        if criteria.min_price is not None:
            conditions.append(JobModel.price >= criteria.min_price)
        if criteria.max_price is not None:
            conditions.append(JobModel.price <= criteria.max_price)

        stmt = select(JobModel)
        if conditions:
            stmt = stmt.where(and_(*conditions))

        stmt = stmt.order_by(*self._ordering(criteria.sort_by)).limit(criteria.limit)
        return await self._fetch(stmt)

    def _ordering(self, sort_by: JobSort) -> list:
        if sort_by == JobSort.OLDEST:
            return [JobModel.created_at.asc()]
        if sort_by == JobSort.PRICE_LOW:
            return [JobModel.price.asc(), JobModel.created_at.desc()]
        if sort_by == JobSort.PRICE_HIGH:
            return [JobModel.price.desc(), JobModel.created_at.desc()]
        if sort_by == JobSort.URGENCY:
            rank = case(
                URGENCY_RANK, value=JobModel.urgency, else_=DEFAULT_URGENCY_RANK
            )
            return [rank.asc(), JobModel.created_at.desc()]
        return [JobModel.created_at.desc()]

    async def _fetch(self, stmt) -> List[Job]:
        result = await self.db.execute(stmt)
        models = result.scalars().all()

        return [self._model_to_entity(model) for model in models]

    def _model_to_entity(self, model: JobModel) -> Job:
        """Convert SQLAlchemy model to domain entity."""
        return Job(
            id=model.id,
            title=model.title,
            description=model.description or "",
            price=model.price,
            urgency=model.urgency,
            location=model.location,
            category=model.category,
            status=JobStatus(model.status),
            poster_id=model.poster_id,
            assigned_to=model.assigned_to,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            completed_at=as_utc(model.completed_at),
        )
