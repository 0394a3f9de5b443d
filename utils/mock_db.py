"""
In-memory collections for UI development.

Every call sleeps a little before answering so that clients see the kind of
latency a hosted database would give them. Nothing survives a restart.
"""

import os
import asyncio
import logging
from typing import Generic, Type, TypeVar

from dotenv import load_dotenv
from pydantic import BaseModel

from models.fixtures import SEED_DATA
from utils.ids import generate_id

load_dotenv()

logger = logging.getLogger("mock_db")

MOCK_DB_LATENCY_SCALE = float(os.getenv("MOCK_DB_LATENCY_SCALE", "1.0"))

# seconds per operation
READ_DELAY = 0.2
WRITE_DELAY = 0.3
REMOVE_DELAY = 0.4

T = TypeVar("T", bound=BaseModel)


class MockDatabase:
    def __init__(self, seed: dict[str, list[BaseModel]] | None = None,
                 latency_scale: float = MOCK_DB_LATENCY_SCALE):
        seed = SEED_DATA if seed is None else seed
        self.collections: dict[str, list[BaseModel]] = {
            name: [record.model_copy(deep=True) for record in records]
            for name, records in seed.items()
        }
        self.latency_scale = latency_scale

    async def simulate_delay(self, seconds: float) -> None:
        delay = seconds * self.latency_scale
        if delay > 0:
            await asyncio.sleep(delay)


class MockCollectionStore(Generic[T]):
    def __init__(self, database: MockDatabase, collection_name: str, model: Type[T]):
        self.database = database
        self.collection_name = collection_name
        self.model = model
        database.collections.setdefault(collection_name, [])

    @property
    def _items(self) -> list[T]:
        return self.database.collections[self.collection_name]

    def _index_of(self, id_: str) -> int:
        for i, item in enumerate(self._items):
            if item.id == id_:
                return i
        return -1

    async def get_all(self) -> list[T]:
        await self.database.simulate_delay(READ_DELAY)
        return [item.model_copy(deep=True) for item in self._items]

    async def get(self, id_: str) -> T | None:
        await self.database.simulate_delay(READ_DELAY)
        index = self._index_of(id_)
        return self._items[index].model_copy(deep=True) if index > -1 else None

    async def add(self, fields: dict) -> T:
        await self.database.simulate_delay(WRITE_DELAY)
        data = {k: v for k, v in fields.items() if k != "id"}
        item = self.model.model_validate({**data, "id": generate_id(self.collection_name)})
        self._items.append(item)
        logger.debug("Added %s to %s", item.id, self.collection_name)
        return item.model_copy(deep=True)

    async def update(self, id_: str, fields: dict) -> None:
        await self.database.simulate_delay(WRITE_DELAY)
        index = self._index_of(id_)
        if index == -1:
            return
        data = {k: v for k, v in fields.items() if k != "id"}
        current = self._items[index].model_dump()
        self._items[index] = self.model.model_validate({**current, **data, "id": id_})

    async def set(self, item: T | dict) -> None:
        await self.database.simulate_delay(WRITE_DELAY)
        stored = self.model.model_validate(item if isinstance(item, dict) else item.model_dump())
        index = self._index_of(stored.id)
        if index > -1:
            self._items[index] = stored
        else:
            self._items.append(stored)

    async def remove(self, id_: str) -> None:
        await self.database.simulate_delay(REMOVE_DELAY)
        self.database.collections[self.collection_name] = [
            item for item in self._items if item.id != id_
        ]

    async def count(self) -> int:
        await self.database.simulate_delay(READ_DELAY)
        return len(self._items)

    async def increment(self, id_: str, field: str, amount: int = 1) -> int | None:
        """Add ``amount`` to a numeric field in one step; None when the id is unknown."""
        await self.database.simulate_delay(WRITE_DELAY)
        index = self._index_of(id_)
        if index == -1:
            return None
        current = self._items[index]
        value = (getattr(current, field) or 0) + amount
        self._items[index] = self.model.model_validate({**current.model_dump(), field: value})
        return value
