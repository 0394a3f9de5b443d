import os
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

from dotenv import load_dotenv

from models.models import (
    ContactSubmission, Event, Hostel, Job, NewsItem, RoommateProfile, StudentSpotlight,
)

load_dotenv()

DATA_BACKEND = os.getenv("DATA_BACKEND", "mock").lower()
BACKENDS = ("mock", "local")

T = TypeVar("T")

# collection name -> record model
COLLECTION_MODELS = {
    "hostels": Hostel,
    "news": NewsItem,
    "events": Event,
    "jobs": Job,
    "roommate_profiles": RoommateProfile,
    "student_spotlights": StudentSpotlight,
    "contact_submissions": ContactSubmission,
}


class CollectionRepository(Protocol[T]):
    async def get_all(self) -> list[T]: ...
    async def get(self, id_: str) -> T | None: ...
    async def add(self, fields: dict) -> T: ...
    async def update(self, id_: str, fields: dict) -> None: ...
    async def set(self, item: Any) -> None: ...
    async def remove(self, id_: str) -> None: ...
    async def count(self) -> int: ...
    async def increment(self, id_: str, field: str, amount: int = 1) -> int | None: ...


@dataclass
class Repositories:
    backend: str
    hostels: CollectionRepository[Hostel]
    news: CollectionRepository[NewsItem]
    events: CollectionRepository[Event]
    jobs: CollectionRepository[Job]
    roommate_profiles: CollectionRepository[RoommateProfile]
    spotlights: CollectionRepository[StudentSpotlight]
    contact_submissions: CollectionRepository[ContactSubmission]
    local_database: Any = None

    def by_collection(self, name: str) -> CollectionRepository:
        return {
            "hostels": self.hostels,
            "news": self.news,
            "events": self.events,
            "jobs": self.jobs,
            "roommate_profiles": self.roommate_profiles,
            "student_spotlights": self.spotlights,
            "contact_submissions": self.contact_submissions,
        }[name]


def build_repositories(backend: str = DATA_BACKEND, mock_database=None, local_database=None) -> Repositories:
    """Wire every collection to one backend: ``mock`` (in memory) or ``local`` (embedded SQLite)."""
    if backend == "mock":
        from utils.mock_db import MockCollectionStore, MockDatabase
        database = mock_database or MockDatabase()
        stores = {name: MockCollectionStore(database, name, model) for name, model in COLLECTION_MODELS.items()}
    elif backend == "local":
        from db import get_local_database
        from utils.crud_local import LocalCollectionStore
        local_database = local_database or get_local_database()
        stores = {name: LocalCollectionStore(local_database, name, model) for name, model in COLLECTION_MODELS.items()}
    else:
        raise ValueError(f"Unknown data backend '{backend}', expected one of {', '.join(BACKENDS)}")
    return Repositories(
        backend=backend,
        hostels=stores["hostels"],
        news=stores["news"],
        events=stores["events"],
        jobs=stores["jobs"],
        roommate_profiles=stores["roommate_profiles"],
        spotlights=stores["student_spotlights"],
        contact_submissions=stores["contact_submissions"],
        local_database=local_database,
    )


_repositories: Repositories | None = None


def get_repositories() -> Repositories:
    global _repositories
    if _repositories is None:
        _repositories = build_repositories()
    return _repositories
