"""
Student Spotlight API Routes

Nominations for the monthly MCM / WCW spotlight and community votes.
Collection: student_spotlights
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from models.models import StudentSpotlight
from models.schemas_spotlight import NominationForm
from utils.errors import StorageBackendError, StorageValidationError
from utils.repositories import Repositories, get_repositories
from utils.storage_service import StorageService, get_storage_service, image_file_from_upload

logger = logging.getLogger("spotlight")

router = APIRouter(prefix="/api/spotlight", tags=["spotlight"])

NOMINATION_CONTENT_TYPE = "news"
NOMINATION_FOLDER = "spotlight-nominations"


# ─────────────────────────────────────────────
# GET /api/spotlight
# ─────────────────────────────────────────────
@router.get("", response_model=list[StudentSpotlight], summary="List nominees, most votes first")
async def list_spotlights(repos: Repositories = Depends(get_repositories)):
    items = await repos.spotlights.get_all()
    return sorted(items, key=lambda s: s.votes, reverse=True)


# ─────────────────────────────────────────────
# POST /api/spotlight/nominations
# ─────────────────────────────────────────────
@router.post("/nominations", response_model=StudentSpotlight, status_code=status.HTTP_201_CREATED,
             summary="Nominate a student")
async def submit_nomination(
    full_name: str = Form(""),
    university: str = Form(""),
    course: str = Form(""),
    year_of_study: str = Form(""),
    about: str = Form(""),
    extracurricular_activities: str = Form(""),
    nominee: str = Form("mcm"),
    image_url: str = Form(""),
    image: Optional[UploadFile] = File(None),
    repos: Repositories = Depends(get_repositories),
    storage: StorageService = Depends(get_storage_service),
):
    """
    Validate the nomination form, upload the nominee photo and store the nominee.
    Returns 400 with a field -> message map when the form is incomplete.
    """
    if nominee not in ("mcm", "wcw"):
        raise HTTPException(status_code=400, detail={"nominee": "Nominee must be 'mcm' or 'wcw'"})
    form = NominationForm(
        full_name=full_name,
        university=university,
        course=course,
        year_of_study=year_of_study,
        about=about,
        extracurricular_activities=extracurricular_activities,
        nominee=nominee,
        image_url=image_url,
    )
    has_file = image is not None and bool(image.filename)
    errors = form.validation_errors(has_image_file=has_file)
    if errors:
        raise HTTPException(status_code=400, detail=errors)

    photo_url = form.image_url
    if has_file:
        try:
            photo_url = await storage.upload_image(
                await image_file_from_upload(image), NOMINATION_CONTENT_TYPE, NOMINATION_FOLDER
            )
        except StorageValidationError as e:
            raise HTTPException(status_code=400, detail={"image": str(e)})
        except StorageBackendError as e:
            raise HTTPException(status_code=502, detail={"submit": str(e)})

    fields = form.to_nominee(photo_url)
    fields["date"] = datetime.now(timezone.utc).date().isoformat()
    created = await repos.spotlights.add(fields)
    logger.info("Nomination submitted for %s (%s)", created.name, created.id)
    return created


# ─────────────────────────────────────────────
# POST /api/spotlight/{spotlight_id}/vote
# ─────────────────────────────────────────────
@router.post("/{spotlight_id}/vote", summary="Add one vote to a nominee")
async def vote(spotlight_id: str, repos: Repositories = Depends(get_repositories)):
    votes = await repos.spotlights.increment(spotlight_id, "votes")
    if votes is None:
        raise HTTPException(status_code=404, detail="Nominee not found")
    return {"status": "ok", "votes": votes}
