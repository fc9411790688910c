"""Monster CRUD, re-derivation and FoundryVTT export endpoints."""

import json

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel, Field

from auth import User, get_current_user
from config import MAX_LEVEL, MIN_LEVEL
from engine.foundry import export_filename, export_monster
from engine.stats import apply_level_and_road_map
from engine.store import MonsterNotFoundError, MonsterStore
from logging_util import setup_logger
from models.monster import Monster, MonsterFields, MonsterUpdate

logger = setup_logger(__name__)

router = APIRouter()


class RederiveRequest(BaseModel):
    """New level and/or road map for a stored monster."""
    level: int | None = Field(default=None, ge=MIN_LEVEL, le=MAX_LEVEL)
    road_map: str | None = None


def _get_store(request: Request) -> MonsterStore:
    """Get the monster store from app state."""
    return request.app.state.monsters


def _get_owned(store: MonsterStore, monster_id: str, user: User) -> Monster:
    try:
        return store.get(monster_id, user.owner_id)
    except MonsterNotFoundError:
        logger.info("Monster %s not found for %s", monster_id, user.owner_id)
        raise HTTPException(status_code=404, detail="Monster not found")


@router.get("/monsters", response_model=list[Monster])
def list_monsters(
    request: Request,
    user: User = Depends(get_current_user),
) -> list[Monster]:
    """List the authenticated user's monsters, newest first."""
    return _get_store(request).list(user.owner_id)


@router.get("/monsters/{monster_id}", response_model=Monster)
def get_monster(
    monster_id: str,
    request: Request,
    user: User = Depends(get_current_user),
) -> Monster:
    """Get a single monster."""
    return _get_owned(_get_store(request), monster_id, user)


@router.post("/monsters", response_model=Monster, status_code=201)
def create_monster(
    body: MonsterFields,
    request: Request,
    user: User = Depends(get_current_user),
) -> Monster:
    """Create a monster. Unknown fields in the body are ignored."""
    return _get_store(request).create(user.owner_id, body)


@router.put("/monsters/{monster_id}", response_model=Monster)
def update_monster(
    monster_id: str,
    body: MonsterUpdate,
    request: Request,
    user: User = Depends(get_current_user),
) -> Monster:
    """Apply the fields present in the body to a monster.

    An explicit null clears road_map; on any other field it is ignored.
    """
    changes = {
        field: value
        for field, value in body.model_dump(exclude_unset=True, by_alias=True).items()
        if value is not None or field == "road_map"
    }
    try:
        return _get_store(request).update(monster_id, user.owner_id, changes)
    except MonsterNotFoundError:
        raise HTTPException(status_code=404, detail="Monster not found")


@router.post("/monsters/{monster_id}/rederive", response_model=Monster)
def rederive_monster(
    monster_id: str,
    body: RederiveRequest,
    request: Request,
    user: User = Depends(get_current_user),
) -> Monster:
    """Change level and/or road map and recompute derived stats.

    Omitted fields keep their stored value. When the monster ends up with a
    road map, every stat the road map controls and every attack bonus is
    replaced.
    """
    store = _get_store(request)
    current = _get_owned(store, monster_id, user)
    fields = current.model_dump(by_alias=True)
    level = body.level if body.level is not None else current.level
    road_map = body.road_map if "road_map" in body.model_fields_set else current.road_map

    derived = apply_level_and_road_map(fields, level, road_map)
    return store.update(monster_id, user.owner_id, derived)


@router.delete("/monsters/{monster_id}", status_code=204)
def delete_monster(
    monster_id: str,
    request: Request,
    user: User = Depends(get_current_user),
) -> Response:
    """Delete a monster."""
    try:
        _get_store(request).delete(monster_id, user.owner_id)
    except MonsterNotFoundError:
        raise HTTPException(status_code=404, detail="Monster not found")
    return Response(status_code=204)


@router.get("/monsters/{monster_id}/export")
def export_monster_file(
    monster_id: str,
    request: Request,
    user: User = Depends(get_current_user),
) -> Response:
    """Download a monster as a FoundryVTT pf2e actor JSON file."""
    monster = _get_owned(_get_store(request), monster_id, user)
    document = export_monster(monster.model_dump(mode="json", by_alias=True))
    filename = export_filename(monster.name)
    logger.info("Exporting monster %s as %s", monster_id, filename)
    return Response(
        content=json.dumps(document),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
