"""
CampusGig marketplace service.

Job lifecycle, reciprocal ratings and notifications for a campus task
marketplace, plus the client-side read synchronization layer.
"""

__version__ = "0.1.0"
__author__ = "CampusGig Team"
__description__ = "CampusGig Marketplace Service"
