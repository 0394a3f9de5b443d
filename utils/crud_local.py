import logging
from typing import Generic, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import func, select, update

from db import LocalDatabase
from models.models_local import TABLES
from utils.ids import generate_id

logger = logging.getLogger("local_db")

T = TypeVar("T", bound=BaseModel)


class LocalCollectionStore(Generic[T]):
    """One table of the embedded database; the image is saved after every write."""

    def __init__(self, database: LocalDatabase, collection_name: str, model: Type[T]):
        self.database = database
        self.collection_name = collection_name
        self.model = model
        self.table = TABLES[collection_name]

    def _to_model(self, row) -> T:
        return self.model.model_validate(row, from_attributes=True)

    async def get_all(self) -> list[T]:
        with self.database.session() as db:
            rows = db.execute(select(self.table)).scalars().all()
            return [self._to_model(r) for r in rows]

    async def get(self, id_: str) -> T | None:
        with self.database.session() as db:
            row = db.get(self.table, id_)
            return self._to_model(row) if row else None

    async def add(self, fields: dict) -> T:
        data = {k: v for k, v in fields.items() if k != "id"}
        item = self.model.model_validate({**data, "id": generate_id(self.collection_name)})
        with self.database.session() as db:
            db.add(self.table(**item.model_dump()))
        self.database.save()
        logger.debug("Added %s to %s", item.id, self.collection_name)
        return item

    async def update(self, id_: str, fields: dict) -> None:
        with self.database.session() as db:
            row = db.get(self.table, id_)
            if row is None:
                return
            current = self._to_model(row).model_dump()
            merged = self.model.model_validate({**current, **fields, "id": id_})
            for column, value in merged.model_dump().items():
                setattr(row, column, value)
        self.database.save()

    async def set(self, item: T | dict) -> None:
        record = self.model.model_validate(item if isinstance(item, dict) else item.model_dump())
        with self.database.session() as db:
            db.merge(self.table(**record.model_dump()))
        self.database.save()

    async def remove(self, id_: str) -> None:
        with self.database.session() as db:
            row = db.get(self.table, id_)
            if row is None:
                return
            db.delete(row)
        self.database.save()

    async def count(self) -> int:
        with self.database.session() as db:
            return db.execute(select(func.count()).select_from(self.table)).scalar_one()

    async def increment(self, id_: str, field: str, amount: int = 1) -> int | None:
        column = getattr(self.table, field)
        with self.database.session() as db:
            result = db.execute(
                update(self.table)
                .where(self.table.id == id_)
                .values(**{field: func.coalesce(column, 0) + amount})
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                return None
            value = db.execute(select(column).where(self.table.id == id_)).scalar_one()
        self.database.save()
        return value
