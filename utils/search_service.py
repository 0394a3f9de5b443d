import re
from dataclasses import dataclass
from typing import Iterable, Literal, Union

from models.models import Event, Hostel, Job, NewsItem

SearchType = Literal["hostel", "job", "event", "news"]


@dataclass
class SearchResult:
    search_type: SearchType
    item: Union[Hostel, Job, Event, NewsItem]

    @property
    def title(self) -> str:
        return getattr(self.item, "title", None) or getattr(self.item, "name", "")


def _matches(text: str | None, query: str) -> bool:
    return bool(text) and query.lower() in text.lower()


def max_price_of(hostel: Hostel) -> int | None:
    """Upper bound of a range like ``"600,000 - 1,200,000 UGX"``."""
    parts = hostel.price_range.split("-")
    digits = re.sub(r"[^0-9]", "", parts[-1])
    return int(digits) if digits else None


class SearchService:
    def __init__(self):
        self.hostels: list[Hostel] = []
        self.jobs: list[Job] = []
        self.events: list[Event] = []
        self.news: list[NewsItem] = []

    def update(self, hostels: Iterable[Hostel] = (), jobs: Iterable[Job] = (),
               events: Iterable[Event] = (), news: Iterable[NewsItem] = ()) -> None:
        self.hostels = list(hostels)
        self.jobs = list(jobs)
        self.events = list(events)
        self.news = list(news)

    def search_hostels(self, query: str) -> list[SearchResult]:
        return [
            SearchResult("hostel", h) for h in self.hostels
            if _matches(h.name, query) or _matches(h.location, query)
            or _matches(h.description, query) or _matches(h.price_range, query)
        ]

    def search_jobs(self, query: str) -> list[SearchResult]:
        return [
            SearchResult("job", j) for j in self.jobs
            if _matches(j.title, query) or _matches(j.company, query) or _matches(j.description, query)
        ]

    def search_events(self, query: str) -> list[SearchResult]:
        return [
            SearchResult("event", e) for e in self.events
            if _matches(e.title, query) or _matches(e.location, query) or _matches(e.description, query)
        ]

    def search_news(self, query: str) -> list[SearchResult]:
        return [
            SearchResult("news", n) for n in self.news
            if _matches(n.title, query) or _matches(n.description, query) or _matches(n.source, query)
        ]

    def search_all(self, query: str) -> list[SearchResult]:
        if not query.strip():
            return []
        normalized = query.lower()
        results = (
            self.search_hostels(query) + self.search_jobs(query)
            + self.search_events(query) + self.search_news(query)
        )

        # exact title matches first, then titles starting with the query
        def rank(result: SearchResult) -> int:
            title = result.title.lower()
            if title == normalized:
                return 0
            if title.startswith(normalized):
                return 1
            return 2

        return sorted(results, key=rank)

    def filter_hostels_by_price(self, max_price: int) -> list[Hostel]:
        return [h for h in self.hostels if (max_price_of(h) or 0) <= max_price]

    def filter_hostels_by_university(self, university_id: str) -> list[Hostel]:
        return [h for h in self.hostels if h.university_id == university_id]

    def filter_jobs_by_type(self, job_type: str) -> list[Job]:
        return [j for j in self.jobs if j.type == job_type]

    def search_and_filter_hostels(self, query: str, max_price: int | None = None,
                                  university_id: str | None = None) -> list[Hostel]:
        results = [r.item for r in self.search_hostels(query)]
        if max_price:
            results = [h for h in results if (max_price_of(h) or 0) <= max_price]
        if university_id:
            results = [h for h in results if h.university_id == university_id]
        return results
