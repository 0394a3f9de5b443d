"""
CRUD routes shared by the hostel, news, event, job and roommate collections.

The same five operations are mounted once per collection; which backend
answers them (mock or embedded database) is decided by ``DATA_BACKEND``.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from utils.repositories import COLLECTION_MODELS, Repositories, get_repositories

# url segment -> collection name
ROUTED_COLLECTIONS = {
    "hostels": "hostels",
    "news": "news",
    "events": "events",
    "jobs": "jobs",
    "roommate-profiles": "roommate_profiles",
}


def build_collection_router(path: str, collection: str) -> APIRouter:
    model = COLLECTION_MODELS[collection]
    router = APIRouter(prefix=f"/api/{path}", tags=[path])

    def repo_of(repos: Repositories):
        return repos.by_collection(collection)

    @router.get("", response_model=list[model], summary=f"List {path}")
    async def list_items(repos: Repositories = Depends(get_repositories)):
        return await repo_of(repos).get_all()

    @router.get("/{item_id}", response_model=model, summary=f"Get one of {path}")
    async def get_item(item_id: str, repos: Repositories = Depends(get_repositories)):
        item = await repo_of(repos).get(item_id)
        if item is None:
            raise HTTPException(status_code=404, detail=f"{collection} '{item_id}' not found")
        return item

    @router.post("", response_model=model, status_code=status.HTTP_201_CREATED, summary=f"Add to {path}")
    async def add_item(payload: Dict[str, Any] = Body(...), repos: Repositories = Depends(get_repositories)):
        try:
            return await repo_of(repos).add(payload)
        except ValidationError as e:
            raise RequestValidationError(e.errors())

    @router.patch("/{item_id}", summary=f"Merge fields into one of {path}")
    async def update_item(item_id: str, payload: Dict[str, Any] = Body(...),
                          repos: Repositories = Depends(get_repositories)):
        try:
            await repo_of(repos).update(item_id, payload)
        except ValidationError as e:
            raise RequestValidationError(e.errors())
        return {"status": "ok"}

    @router.put("/{item_id}", response_model=model, summary=f"Replace or insert one of {path}")
    async def set_item(item_id: str, payload: Dict[str, Any] = Body(...),
                       repos: Repositories = Depends(get_repositories)):
        try:
            record = model.model_validate({**payload, "id": item_id})
        except ValidationError as e:
            raise RequestValidationError(e.errors())
        await repo_of(repos).set(record)
        return record

    @router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT, summary=f"Remove one of {path}")
    async def remove_item(item_id: str, repos: Repositories = Depends(get_repositories)):
        await repo_of(repos).remove(item_id)

    return router


routers = [build_collection_router(path, name) for path, name in ROUTED_COLLECTIONS.items()]
