from fastapi import FastAPI, Depends, HTTPException, Query, Path, Form, File, UploadFile, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from typing import List, Optional
import asyncio
import logging

from dotenv import load_dotenv

from models.models import Hostel, Service, ServiceProvider, University
from models.fixtures import SERVICES, UNIVERSITIES, get_service_providers
from utils.errors import DatabaseInitError, StorageBackendError, StorageValidationError
from utils.repositories import Repositories, get_repositories
from utils.search_service import SearchService
from utils.storage_service import CONTENT_TYPES, StorageService, get_storage_service, image_file_from_upload
import collection_routes
import contact_routes
import roommate_routes
import spotlight_routes

load_dotenv()

logging.basicConfig(level=logging.INFO)
logging.info("UniStay API starting")

app = FastAPI(title="UniStay API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for router in collection_routes.routers:
    app.include_router(router)
app.include_router(roommate_routes.router)
app.include_router(spotlight_routes.router)
app.include_router(contact_routes.router)


@app.exception_handler(DatabaseInitError)
async def database_init_error_handler(request: Request, exc: DatabaseInitError):
    return JSONResponse(status_code=503, content={"status": "error", "message": str(exc)})


@app.get("/health", tags=["meta"], summary="Health check")
def health(repos: Repositories = Depends(get_repositories)):
    return {"status": "ok", "backend": repos.backend}


@app.get("/universities", response_model=list[University], tags=["catalog"], summary="List universities")
def list_universities():
    return UNIVERSITIES


@app.get("/services", response_model=list[Service], tags=["catalog"], summary="List services")
def list_services():
    return SERVICES


@app.get("/services/{service_id}/providers", response_model=list[ServiceProvider], tags=["catalog"],
         summary="Service providers near a university")
def list_service_providers(
    service_id: str = Path(..., description="Service id, e.g. 'food'"),
    university: str = Query(..., description="University name, e.g. 'Makerere University'"),
):
    providers = get_service_providers(university, service_id)
    if providers is None:
        raise HTTPException(status_code=404, detail=f"No '{service_id}' providers listed for {university}")
    return providers


def _check_content_type(content_type: str) -> None:
    if content_type not in CONTENT_TYPES:
        raise HTTPException(status_code=400, detail=f"Unknown content type: {content_type}")


@app.post("/api/uploads/{content_type}", tags=["uploads"], summary="Upload one image")
async def upload_image(
    content_type: str,
    file: UploadFile = File(...),
    folder: str = Form(""),
    storage: StorageService = Depends(get_storage_service),
):
    _check_content_type(content_type)
    try:
        url = await storage.upload_image(await image_file_from_upload(file), content_type, folder)
    except StorageValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageBackendError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"url": url}


@app.post("/api/uploads/{content_type}/batch", tags=["uploads"], summary="Upload several images")
async def upload_images(
    content_type: str,
    files: List[UploadFile] = File(...),
    folder: str = Form(""),
    storage: StorageService = Depends(get_storage_service),
):
    _check_content_type(content_type)
    images = [await image_file_from_upload(f) for f in files]
    try:
        urls = await storage.upload_multiple_images(images, content_type, folder)
    except StorageValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageBackendError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"urls": urls}


@app.delete("/api/uploads/{content_type}", status_code=status.HTTP_204_NO_CONTENT, tags=["uploads"],
            summary="Delete an uploaded image by its public URL")
async def delete_image(
    content_type: str,
    url: str = Query(...),
    storage: StorageService = Depends(get_storage_service),
):
    _check_content_type(content_type)
    try:
        await storage.delete_image(url, content_type)
    except StorageValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageBackendError as e:
        raise HTTPException(status_code=502, detail=str(e))


async def _search_service(repos: Repositories) -> SearchService:
    search = SearchService()
    search.update(
        hostels=await repos.hostels.get_all(),
        jobs=await repos.jobs.get_all(),
        events=await repos.events.get_all(),
        news=await repos.news.get_all(),
    )
    return search


@app.get("/api/search", tags=["search"], summary="Search hostels, jobs, events and news")
async def search_all(q: str = Query(""), repos: Repositories = Depends(get_repositories)):
    search = await _search_service(repos)
    return [
        {"search_type": r.search_type, "item": r.item.model_dump()}
        for r in search.search_all(q)
    ]


@app.get("/api/search/hostels", response_model=list[Hostel], tags=["search"], summary="Search and filter hostels")
async def search_hostels(
    q: str = Query(""),
    max_price: Optional[int] = Query(None, ge=0),
    university_id: Optional[str] = Query(None),
    repos: Repositories = Depends(get_repositories),
):
    search = await _search_service(repos)
    return search.search_and_filter_hostels(q, max_price=max_price, university_id=university_id)


STATS_COLLECTIONS = ("hostels", "news", "events", "jobs", "roommate_profiles", "student_spotlights",
                     "contact_submissions")


@app.get("/api/stats", tags=["meta"], summary="Number of records per collection")
async def collection_stats(repos: Repositories = Depends(get_repositories)):
    counts = await asyncio.gather(*(repos.by_collection(name).count() for name in STATS_COLLECTIONS))
    return dict(zip(STATS_COLLECTIONS, counts))


@app.post("/api/local-db/save", tags=["meta"], summary="Persist the embedded database image")
def save_local_database(repos: Repositories = Depends(get_repositories)):
    if repos.backend != "local" or repos.local_database is None:
        raise HTTPException(status_code=409, detail="The embedded database backend is not active")
    repos.local_database.save()
    return {"status": "ok", "message": "Local database saved"}
