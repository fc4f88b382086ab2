import logging
from typing import Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cartify.errors import StorageError
from cartify.models.address import Address

logger = logging.getLogger(__name__)


class AddressStore:
    """Persistent address collection backed by a SQLAlchemy session.

    Filters are plain equality dicts over column names, e.g.
    ``{"user_id": 3, "is_default_shipping": True}``. Every write commits on
    its own; multi-step sequences are therefore not atomic.
    Any SQLAlchemy failure rolls the session back and surfaces as
    :class:`StorageError`.
    """

    model = Address

    def __init__(self, db: Session):
        self.db = db

    def _query(self, filter: dict):
        return self.db.query(self.model).filter_by(**filter)

    def _fail(self, action: str, exc: Exception):
        logger.error("Address store %s failed: %s", action, exc)
        self.db.rollback()
        return StorageError(f"Address store {action} failed")

    def find_many(self, filter: dict, order_by: Iterable[str] = ()) -> List[Address]:
        # order_by entries are column names, "-" prefix for descending
        order_by = list(order_by)
        columns = [getattr(self.model, name.lstrip("-")) for name in order_by]
        try:
            query = self._query(filter)
            for name, column in zip(order_by, columns):
                query = query.order_by(column.desc() if name.startswith("-") else column.asc())
            return query.all()
        except SQLAlchemyError as e:
            raise self._fail("find_many", e) from e

    def find_one(self, filter: dict) -> Optional[Address]:
        try:
            return self._query(filter).first()
        except SQLAlchemyError as e:
            raise self._fail("find_one", e) from e

    def insert_one(self, record: dict) -> Address:
        address = self.model(**record)
        try:
            self.db.add(address)
            self.db.commit()
            self.db.refresh(address)
        except SQLAlchemyError as e:
            raise self._fail("insert_one", e) from e
        return address

    def update_many(self, filter: dict, patch: dict, exclude_id: Optional[int] = None) -> int:
        try:
            query = self._query(filter)
            if exclude_id is not None:
                query = query.filter(self.model.id != exclude_id)
            count = query.update(patch, synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("update_many", e) from e
        return count

    def update_one(self, filter: dict, patch: dict) -> Optional[Address]:
        try:
            address = self._query(filter).first()
            if address is None:
                return None
            for key, value in patch.items():
                setattr(address, key, value)
            self.db.commit()
            self.db.refresh(address)
        except SQLAlchemyError as e:
            raise self._fail("update_one", e) from e
        return address

    def delete_one(self, id: int) -> Optional[Address]:
        try:
            address = self._query({"id": id}).first()
            if address is None:
                return None
            # Detached copy so callers can still read the deleted row
            snapshot = self.model(**{c.name: getattr(address, c.name) for c in self.model.__table__.columns})
            self.db.delete(address)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("delete_one", e) from e
        return snapshot
