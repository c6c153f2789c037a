from abc import ABC, abstractmethod

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models import ServiceCategory


class CategoryProvider(ABC):
    """Read-only lookup of service categories owned by the reference data store."""

    @abstractmethod
    def category_exists(self, category_id: int) -> bool:
        raise NotImplementedError


class DatabaseCategoryProvider(CategoryProvider):
    def __init__(self, db: Session) -> None:
        self._db = db

    def category_exists(self, category_id: int) -> bool:
        found = self._db.scalar(
            select(ServiceCategory.id).where(
                ServiceCategory.id == category_id,
                ServiceCategory.is_active.is_(True),
            )
        )
        return found is not None


def list_active_categories(db: Session) -> list[ServiceCategory]:
    return list(
        db.scalars(
            select(ServiceCategory).where(ServiceCategory.is_active.is_(True)).order_by(ServiceCategory.name)
        ).all()
    )
