# app/routers/users.py
"""User administration and the stub login."""

from fastapi import APIRouter, Depends

from app.dependencies import get_repository
from app.exceptions import NotFoundError
from app.schemas.user import LoginRequest, UserCreate, UserOut, UserUpdate
from app.services.auth_service import login
from app.services.repository import EntityRepository

router = APIRouter()


@router.post("/auth/login", response_model=UserOut, summary="Stub login - any password accepted")
def login_user(body: LoginRequest, repo: EntityRepository = Depends(get_repository)):
    return login(repo, body.username, body.password)


@router.get("/users", response_model=list[UserOut], summary="List users")
def list_users(repo: EntityRepository = Depends(get_repository)):
    return repo.list("user")


@router.post("/users", response_model=UserOut, summary="Create a user")
def create_user(body: UserCreate, repo: EntityRepository = Depends(get_repository)):
    return repo.create("user", body.model_dump())


@router.patch("/users/{user_id}", response_model=UserOut, summary="Update a user")
def update_user(user_id: str, body: UserUpdate, repo: EntityRepository = Depends(get_repository)):
    user = repo.update("user", user_id, body.model_dump(exclude_unset=True))
    if user is None:
        raise NotFoundError("User not found")
    return user


@router.delete("/users/{user_id}", summary="Delete a user")
def delete_user(user_id: str, repo: EntityRepository = Depends(get_repository)):
    if not repo.delete("user", user_id):
        raise NotFoundError("User not found")
    return {"success": True}
