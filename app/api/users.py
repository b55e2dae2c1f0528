from typing import Optional

from fastapi import APIRouter, Depends

from app.api.deps import get_user_service, parse_id
from app.core.security import Operation, Role, require
from app.models.api_models import UserCreate, UserUpdate
from app.services.user_service import UserService

router = APIRouter()

@router.get("/users")
async def list_users(
    role: Role = Depends(require(Operation.LIST_USERS)),
    service: UserService = Depends(get_user_service),
):
    users = await service.list_users()
    return {"message": "User fetched", "users": [u.to_dict() for u in users]}

@router.post("/users/register")
async def register_user(
    req: UserCreate,
    role: Role = Depends(require(Operation.CREATE_USER)),
    service: UserService = Depends(get_user_service),
):
    user = await service.create_user(req.name, req.password)
    return {"message": "New user created", "name": user.name, "role": user.role}

@router.put("/users")
async def update_user(
    req: UserUpdate,
    role: Role = Depends(require(Operation.UPDATE_USER)),
    service: UserService = Depends(get_user_service),
):
    await service.update_user(req.id, req.name, req.password)
    return {"message": "User updated"}

@router.delete("/users")
async def delete_user(
    id: Optional[str] = None,
    _id: Optional[str] = None,
    role: Role = Depends(require(Operation.DELETE_USER)),
    service: UserService = Depends(get_user_service),
):
    await service.delete_user(parse_id(_id or id, "user ID"))
    return {"message": "User deleted"}
