"""Admin endpoints for user registration and API key management."""

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from pydantic import BaseModel

import config
from auth import TokenStore
from config import save_secret

router = APIRouter()


class RegisterRequest(BaseModel):
    """Request body for registering a new user."""
    owner_id: str
    name: str


class RegisterResponse(BaseModel):
    """An owner's API key."""
    api_key: str
    owner_id: str


class UpdateUserRequest(BaseModel):
    """Request body for renaming a user."""
    name: str


class UpdateUserResponse(BaseModel):
    """Response after renaming a user."""
    owner_id: str
    name: str


class DeleteUserResponse(BaseModel):
    """Response after deleting a user."""
    message: str
    monsters_removed: int


class ChangeSecretRequest(BaseModel):
    """Request body for changing the admin secret."""
    new_secret: str


class ChangeSecretResponse(BaseModel):
    """Response after changing the admin secret."""
    message: str


def require_admin(x_admin_secret: str = Header(..., alias="X-Admin-Secret")) -> None:
    """FastAPI dependency: reject requests without the current admin secret."""
    if x_admin_secret != config.ADMIN_SECRET:
        raise HTTPException(status_code=403, detail="Invalid admin secret")


def _tokens(request: Request) -> TokenStore:
    return request.app.state.tokens


@router.put("/secret", response_model=ChangeSecretResponse, dependencies=[Depends(require_admin)])
def change_admin_secret(body: ChangeSecretRequest) -> ChangeSecretResponse:
    """Change the admin secret at runtime. Takes effect immediately."""
    if not body.new_secret or len(body.new_secret) < 8:
        raise HTTPException(
            status_code=400,
            detail="New secret must be at least 8 characters",
        )

    config.ADMIN_SECRET = body.new_secret
    save_secret()
    return ChangeSecretResponse(message="Admin secret updated")


@router.post("/register", response_model=RegisterResponse, dependencies=[Depends(require_admin)])
def register_user(body: RegisterRequest, request: Request) -> RegisterResponse:
    """Register a new user and return their API key."""
    try:
        api_key = _tokens(request).register(body.owner_id, body.name)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return RegisterResponse(api_key=api_key, owner_id=body.owner_id)


@router.get("/users", dependencies=[Depends(require_admin)])
def list_users(request: Request) -> list[dict]:
    """List all registered users. Does not expose API keys."""
    return [user.model_dump() for user in _tokens(request).users()]


@router.get(
    "/users/{owner_id}/token",
    response_model=RegisterResponse,
    dependencies=[Depends(require_admin)],
)
def get_user_token(owner_id: str, request: Request) -> RegisterResponse:
    """Retrieve the API key for a specific user."""
    api_key = _tokens(request).token_for(owner_id)
    if api_key is None:
        raise HTTPException(status_code=404, detail=f"owner_id '{owner_id}' not found")

    return RegisterResponse(api_key=api_key, owner_id=owner_id)


@router.patch(
    "/users/{owner_id}",
    response_model=UpdateUserResponse,
    dependencies=[Depends(require_admin)],
)
def edit_user(owner_id: str, body: UpdateUserRequest, request: Request) -> UpdateUserResponse:
    """Update a user's display name."""
    if not _tokens(request).rename(owner_id, body.name):
        raise HTTPException(status_code=404, detail=f"owner_id '{owner_id}' not found")

    return UpdateUserResponse(owner_id=owner_id, name=body.name)


@router.post(
    "/users/{owner_id}/rotate-token",
    response_model=RegisterResponse,
    dependencies=[Depends(require_admin)],
)
def rotate_user_token(owner_id: str, request: Request) -> RegisterResponse:
    """Rotate a user's API key. The old key stops working immediately."""
    new_key = _tokens(request).rotate(owner_id)
    if new_key is None:
        raise HTTPException(status_code=404, detail=f"owner_id '{owner_id}' not found")

    return RegisterResponse(api_key=new_key, owner_id=owner_id)


@router.delete(
    "/users/{owner_id}",
    response_model=DeleteUserResponse,
    dependencies=[Depends(require_admin)],
)
def delete_user(owner_id: str, request: Request) -> DeleteUserResponse:
    """Delete a user, their API key and every monster they own."""
    if not _tokens(request).remove(owner_id):
        raise HTTPException(status_code=404, detail=f"owner_id '{owner_id}' not found")

    store = request.app.state.monsters
    owned = store.list(owner_id)
    for monster in owned:
        store.delete(monster.id, owner_id)

    return DeleteUserResponse(
        message=f"User '{owner_id}' deleted",
        monsters_removed=len(owned),
    )
