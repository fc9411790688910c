"""Bearer-token authentication for Monster Maker.

Every monster route runs behind `get_current_user`; the resulting owner_id
scopes all record store access.
"""

import json
import os
import secrets
import tempfile
import threading
from pathlib import Path

from fastapi import HTTPException, Request
from pydantic import BaseModel

from logging_util import setup_logger

logger = setup_logger(__name__)

TOKEN_PREFIX = "mm_"


class User(BaseModel):
    """A registered user; owner of their monsters."""
    owner_id: str
    name: str


class TokenStore:
    """API keys mapped to users, persisted to a JSON file.

    Mutations are serialised so overlapping admin requests cannot clobber
    each other's writes.
    """

    def __init__(self, path: str):
        self.path = path
        self._tokens: dict[str, User] = {}
        self._lock = threading.Lock()
        self.load()

    def load(self) -> None:
        """(Re)load keys from disk. A missing file means no users."""
        self._tokens.clear()
        if not Path(self.path).exists():
            return
        with open(self.path) as f:
            data = json.load(f)
        self._tokens.update({key: User(**value) for key, value in data.items()})

    def save(self) -> None:
        """Persist keys (atomic write through a unique temp file)."""
        data = {key: user.model_dump() for key, user in self._tokens.items()}
        directory = os.path.dirname(os.path.abspath(self.path))
        with tempfile.NamedTemporaryFile(
            "w", dir=directory, suffix=".tmp", delete=False
        ) as f:
            json.dump(data, f, indent=2)
        os.replace(f.name, self.path)

    def _find(self, owner_id: str) -> tuple[str, User] | None:
        for key, user in list(self._tokens.items()):
            if user.owner_id == owner_id:
                return key, user
        return None

    @staticmethod
    def _new_key() -> str:
        return TOKEN_PREFIX + secrets.token_hex(32)

    def users(self) -> list[User]:
        return list(self._tokens.values())

    def lookup(self, api_key: str) -> User | None:
        """Resolve a raw API key to its user."""
        return self._tokens.get(api_key)

    def token_for(self, owner_id: str) -> str | None:
        found = self._find(owner_id)
        return found[0] if found else None

    def register(self, owner_id: str, name: str) -> str:
        """Create a user and return their new API key.

        Raises:
            ValueError: If owner_id is already registered.
        """
        with self._lock:
            if self._find(owner_id) is not None:
                raise ValueError(f"owner_id '{owner_id}' is already registered")
            api_key = self._new_key()
            self._tokens[api_key] = User(owner_id=owner_id, name=name)
            self.save()
        logger.info("Registered user %s", owner_id)
        return api_key

    def rename(self, owner_id: str, name: str) -> bool:
        """Change a user's display name. Returns False if unknown."""
        with self._lock:
            found = self._find(owner_id)
            if found is None:
                return False
            found[1].name = name
            self.save()
        return True

    def rotate(self, owner_id: str) -> str | None:
        """Issue a new key for a user, invalidating the old one.

        Returns:
            The new key, or None if the owner_id is not registered.
        """
        with self._lock:
            found = self._find(owner_id)
            if found is None:
                return None
            old_key, user = found
            del self._tokens[old_key]
            new_key = self._new_key()
            self._tokens[new_key] = user
            self.save()
        logger.info("Rotated API key for %s", owner_id)
        return new_key

    def remove(self, owner_id: str) -> bool:
        """Delete a user and their key. Returns False if unknown."""
        with self._lock:
            found = self._find(owner_id)
            if found is None:
                return False
            del self._tokens[found[0]]
            self.save()
        logger.info("Removed user %s", owner_id)
        return True


def get_current_user(request: Request) -> User:
    """FastAPI dependency: extract and validate the Bearer token.

    Usage:
        @router.get("/monsters")
        def list_monsters(user: User = Depends(get_current_user)):
            ...

    Raises:
        HTTPException 401: If the token is missing or invalid.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="No token provided")

    token = auth_header[len("Bearer "):]
    user = request.app.state.tokens.lookup(token)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid token")

    return user
