"""
CRUD operations (Create, Read, Update, Delete) for database models.

This layer provides a clean separation between API routes and database operations,
following the Repository pattern. store.RecordStore wraps these functions in
the transactional interface used by the lifecycle orchestrator.
"""

from app.crud import account, person, engagement, uploaded_file

__all__ = ["account", "person", "engagement", "uploaded_file"]
