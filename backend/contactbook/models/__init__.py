"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the aggregate root; contacts and auth sessions are scoped by user_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from contactbook.models.user import User  # noqa: F401
from contactbook.models.contact import Contact  # noqa: F401
from contactbook.models.auth_session import AuthSessionRow  # noqa: F401
