"""
Roommate Matching API Routes

Ranks the other roommate profiles for one student.
Collection: roommate_profiles
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from utils.repositories import Repositories, get_repositories
from utils.roommate_matching import MatchFilters, RoommateMatch, SortBy, find_matches

router = APIRouter(prefix="/api/roommate-profiles", tags=["roommate-profiles"])


# ─────────────────────────────────────────────
# GET /api/roommate-profiles/{profile_id}/matches
# ─────────────────────────────────────────────
@router.get("/{profile_id}/matches", response_model=list[RoommateMatch], summary="Best roommate matches")
async def list_matches(
    profile_id: str,
    sort_by: SortBy = Query("match"),
    university_id: List[str] = Query([]),
    gender: List[str] = Query([]),
    age_min: int = Query(18),
    age_max: int = Query(40),
    max_budget: float = Query(10_000_000),
    cleanliness: List[str] = Query([]),
    study_schedule: List[str] = Query([]),
    guest_frequency: List[str] = Query([]),
    drinks_alcohol: List[str] = Query([]),
    lease_duration: List[str] = Query([]),
    is_smoker: Optional[bool] = Query(None),
    repos: Repositories = Depends(get_repositories),
):
    current = await repos.roommate_profiles.get(profile_id)
    if current is None:
        raise HTTPException(status_code=404, detail="Roommate profile not found")
    filters = MatchFilters(
        university_ids=university_id,
        genders=gender,
        age_min=age_min,
        age_max=age_max,
        max_budget=max_budget,
        cleanliness=cleanliness,
        study_schedule=study_schedule,
        guest_frequency=guest_frequency,
        drinks_alcohol=drinks_alcohol,
        lease_duration=lease_duration,
        is_smoker=is_smoker,
    )
    return find_matches(current, await repos.roommate_profiles.get_all(), filters, sort_by)
