"""
Rating direction value object.
"""

from enum import Enum


class RatingType(str, Enum):
    """Direction of a rating on a completed job."""

    POSTER_TO_HELPER = "poster_to_helper"
    HELPER_TO_POSTER = "helper_to_poster"

    @property
    def rater_role(self) -> str:
        """Role of the user giving the rating."""
        return "poster" if self == self.POSTER_TO_HELPER else "helper"

    @property
    def rated_role(self) -> str:
        """Role of the user receiving the rating."""
        return "helper" if self == self.POSTER_TO_HELPER else "poster"
