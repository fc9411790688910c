"""FastAPI app entry point for Monster Maker."""

from datetime import datetime, timezone

from fastapi import Depends, FastAPI

import config
from api.admin import router as admin_router
from api.monsters import router as monsters_router
from api.road_maps import router as road_maps_router
from auth import TokenStore, User, get_current_user
from engine.store import MonsterStore
from logging_util import setup_logger

logger = setup_logger(__name__)

config.load_secret()

app = FastAPI(
    title="Monster Maker",
    description="Build Pathfinder 2e monsters and export them to FoundryVTT",
    version="0.1.0",
)

app.state.tokens = TokenStore(config.TOKENS_FILE)
app.state.monsters = MonsterStore(config.MONSTERS_FILE)

app.include_router(monsters_router, prefix="/api", tags=["Monsters"])
app.include_router(road_maps_router, prefix="/api", tags=["Road Maps"])
app.include_router(admin_router, prefix="/admin", tags=["Admin"])

logger.info("Monster Maker started with data dir %s", config.DATA_DIR)


@app.get("/")
def root() -> dict:
    """Root endpoint returning server info."""
    return {"name": "Monster Maker", "version": "0.1.0", "status": "running"}


@app.get("/api/health")
def health() -> dict:
    """Health check endpoint."""
    return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/api/profile", response_model=User)
def profile(user: User = Depends(get_current_user)) -> User:
    """The authenticated user's profile."""
    return user
