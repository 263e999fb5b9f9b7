"""
Profile SQLAlchemy model.
"""

from sqlalchemy import CheckConstraint, Column, Float, Integer, String

from .base import BaseModel


class ProfileModel(BaseModel):
    """Profile database model.

    The primary key is the user id issued by the external auth service.
    """

    __tablename__ = "profiles"
    __table_args__ = (
        CheckConstraint(
            "average_rating >= 0 AND average_rating <= 5",
            name="ck_profiles_average_rating_range",
        ),
        CheckConstraint("total_ratings >= 0", name="ck_profiles_total_ratings"),
    )

    email = Column(String(255), nullable=False, unique=True)
    display_name = Column(String(50), nullable=True)
    avatar_url = Column(String(500), nullable=True)

    # Derived aggregates, written only through atomic update expressions
    average_rating = Column(Float, nullable=False, default=0.0)
    total_ratings = Column(Integer, nullable=False, default=0)
    tasks_completed = Column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, email={self.email})>"
