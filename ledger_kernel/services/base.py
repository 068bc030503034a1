"""
BaseService -- abstract base for all kernel services.

Services receive a SQLAlchemy ``Session`` from the caller and persist with
``session.flush()`` -- never ``session.commit()``.  The caller (an API
handler, a batch job, or a test) owns commit and rollback, so several service
calls can form one atomic unit.
"""

from abc import ABC

from sqlalchemy.orm import Session


class BaseService(ABC):
    """
    Abstract base class for all kernel services.

    Guarantees:
        - The service never calls ``session.commit()`` or
          ``session.rollback()`` on the outer transaction.  Savepoints
          (``begin_nested``) are used for partial rollback.
    """

    def __init__(self, session: Session):
        self.session = session
