"""
CRUD operations (Create, Read, Update, Delete) for database models.

This layer provides a clean separation between API routes and database operations,
following the Repository pattern.
"""

from talentflow.crud import job, candidate, assessment

__all__ = ["job", "candidate", "assessment"]
