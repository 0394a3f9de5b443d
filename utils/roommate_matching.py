"""
Roommate matching.

Scores how well two roommate profiles fit together (0-100) and ranks the
other profiles in a collection for one student. The score is weighted:
gender preference 20, budget closeness 25, same university 20, lifestyle 25,
shared interests 10.
"""

import math
from typing import Iterable, List, Literal, Optional

from pydantic import BaseModel, Field

from models.models import RoommateProfile

WEIGHTS = {"gender": 20, "budget": 25, "university": 20, "lifestyle": 25, "interest": 10}
LIFESTYLE_FACTORS = 5

# unset values count as the middle level
CLEANLINESS_LEVELS = {"Tidy": 2, "Average": 1, "Relaxed": 0}
GUEST_LEVELS = {"Often": 2, "Sometimes": 1, "Rarely": 0}

SortBy = Literal["match", "recent", "budget-low", "budget-high"]


class RoommateMatch(BaseModel):
    profile: RoommateProfile
    match_score: int


class MatchFilters(BaseModel):
    """Narrows the candidates; empty lists accept everything."""
    university_ids: List[str] = Field(default_factory=list)
    genders: List[str] = Field(default_factory=list)
    age_min: int = 18
    age_max: int = 40
    max_budget: float = 10_000_000
    cleanliness: List[str] = Field(default_factory=list)
    study_schedule: List[str] = Field(default_factory=list)
    guest_frequency: List[str] = Field(default_factory=list)
    drinks_alcohol: List[str] = Field(default_factory=list)
    lease_duration: List[str] = Field(default_factory=list)
    is_smoker: Optional[bool] = None

    def accepts(self, p: RoommateProfile) -> bool:
        listed = [
            (self.university_ids, p.university_id),
            (self.genders, p.gender),
            (self.cleanliness, p.cleanliness),
            (self.study_schedule, p.study_schedule),
            (self.guest_frequency, p.guest_frequency),
            (self.drinks_alcohol, p.drinks_alcohol),
            (self.lease_duration, p.lease_duration),
        ]
        if any(allowed and value not in allowed for allowed, value in listed):
            return False
        if not self.age_min <= (p.age or 0) <= self.age_max:
            return False
        if (p.budget or 0) > self.max_budget:
            return False
        if self.is_smoker is not None and p.is_smoker != self.is_smoker:
            return False
        return True


def _hobbies(profile: RoommateProfile) -> list[str]:
    return [h.strip() for h in (profile.hobbies or "").lower().split(",") if h.strip()]


def _level_closeness(levels: dict, a: str | None, b: str | None) -> float:
    diff = abs(levels.get(a, 1) - levels.get(b, 1))
    if diff == 0:
        return 1
    return 0.5 if diff == 1 else 0


def lifestyle_score(a: RoommateProfile, b: RoommateProfile) -> float:
    score = 0.0
    if a.is_smoker == b.is_smoker:
        score += 1
    if a.study_schedule == b.study_schedule:
        score += 1
    elif "Flexible" in (a.study_schedule, b.study_schedule):
        score += 0.5
    score += _level_closeness(CLEANLINESS_LEVELS, a.cleanliness, b.cleanliness)
    score += _level_closeness(GUEST_LEVELS, a.guest_frequency, b.guest_frequency)
    if a.drinks_alcohol == b.drinks_alcohol:
        score += 1
    elif "Rarely" in (a.drinks_alcohol, b.drinks_alcohol):
        score += 0.5
    return score


def match_score(a: RoommateProfile, b: RoommateProfile) -> int:
    """Compatibility of ``b`` for the student owning ``a``, rounded to 0-100."""
    score = 0.0

    a_likes = a.seeking_gender == "Any" or a.seeking_gender == b.gender
    b_likes = b.seeking_gender == "Any" or b.seeking_gender == a.gender
    if a_likes and b_likes:
        score += WEIGHTS["gender"]

    budget_diff = abs((a.budget or 0) - (b.budget or 0))
    reference = max(a.budget or 1, 1)
    score += max(0.0, 1 - budget_diff / reference) * WEIGHTS["budget"]

    if a.university_id == b.university_id:
        score += WEIGHTS["university"]

    score += lifestyle_score(a, b) / LIFESTYLE_FACTORS * WEIGHTS["lifestyle"]

    interest = 0.0
    if abs((a.year_of_study or 0) - (b.year_of_study or 0)) <= 1:
        interest += 5
    theirs = set(_hobbies(b))
    common = sum(1 for h in _hobbies(a) if h in theirs)
    interest += min(5.0, common * 2.5)
    score += interest / 10 * WEIGHTS["interest"]

    return int(math.floor(score + 0.5))


def find_matches(
    current: RoommateProfile,
    profiles: Iterable[RoommateProfile],
    filters: MatchFilters | None = None,
    sort_by: SortBy = "match",
) -> list[RoommateMatch]:
    filters = filters or MatchFilters()
    matches = [
        RoommateMatch(profile=p, match_score=match_score(current, p))
        for p in profiles
        if p.id != current.id and filters.accepts(p)
    ]
    if sort_by == "match":
        matches.sort(key=lambda m: m.match_score, reverse=True)
    elif sort_by == "recent":
        matches.sort(key=lambda m: m.profile.id, reverse=True)
    elif sort_by == "budget-low":
        matches.sort(key=lambda m: m.profile.budget or 0)
    elif sort_by == "budget-high":
        matches.sort(key=lambda m: m.profile.budget or 0, reverse=True)
    else:
        raise ValueError(f"Unknown sort order '{sort_by}'")
    return matches
