"""
Contact Form API Routes

Messages sent through the public contact form, read by admins.
Collection: contact_submissions
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Form, HTTPException, status

from models.models import ContactSubmission
from models.schemas_contact import ContactForm
from utils.repositories import Repositories, get_repositories

logger = logging.getLogger("contact")

router = APIRouter(prefix="/api/contact", tags=["contact"])


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ─────────────────────────────────────────────
# POST /api/contact
# ─────────────────────────────────────────────
@router.post("", response_model=ContactSubmission, status_code=status.HTTP_201_CREATED,
             summary="Send a message to the UniStay team")
async def submit_contact(
    name: str = Form(""),
    email: str = Form(""),
    phone: str = Form(""),
    subject: str = Form(""),
    message: str = Form(""),
    repos: Repositories = Depends(get_repositories),
):
    form = ContactForm(name=name, email=email, phone=phone, subject=subject, message=message)
    error = form.validation_error()
    if error:
        raise HTTPException(status_code=400, detail=error)
    created = await repos.contact_submissions.add(form.to_submission(_iso_now()))
    logger.info("Contact submission %s received", created.id)
    return created


# ─────────────────────────────────────────────
# GET /api/contact
# ─────────────────────────────────────────────
@router.get("", response_model=list[ContactSubmission], summary="All submissions, newest first")
async def list_contact_submissions(repos: Repositories = Depends(get_repositories)):
    items = await repos.contact_submissions.get_all()
    return sorted(items, key=lambda s: s.timestamp, reverse=True)


@router.get("/count", summary="Number of submissions")
async def count_contact_submissions(repos: Repositories = Depends(get_repositories)):
    return {"count": await repos.contact_submissions.count()}


# ─────────────────────────────────────────────
# POST /api/contact/{submission_id}/read
# ─────────────────────────────────────────────
@router.post("/{submission_id}/read", summary="Mark a submission as read")
async def mark_as_read(submission_id: str, repos: Repositories = Depends(get_repositories)):
    if await repos.contact_submissions.get(submission_id) is None:
        raise HTTPException(status_code=404, detail="Submission not found")
    await repos.contact_submissions.update(submission_id, {"read": True})
    return {"status": "ok"}


@router.delete("/{submission_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a submission")
async def remove_contact_submission(submission_id: str, repos: Repositories = Depends(get_repositories)):
    await repos.contact_submissions.remove(submission_id)
