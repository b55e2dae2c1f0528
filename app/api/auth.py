from fastapi import APIRouter, Depends, Request

from app.api.deps import get_user_service
from app.core.errors import AuthorizationError, NotFoundError
from app.core.logger import logger
from app.core.security import get_session_user
from app.models.api_models import LoginRequest
from app.services.user_service import UserService

router = APIRouter()

@router.post("/auth/login")
async def login(req: LoginRequest, request: Request, service: UserService = Depends(get_user_service)):
    user = await service.authenticate(req.name, req.password)
    request.session.clear()
    request.session["user_id"] = user.id
    logger.info(f"🔓 '{user.name}' logged in ({user.role})")
    return {"message": "Logged in", "user": user.name, "role": user.role}

@router.post("/auth/logout")
async def logout(request: Request):
    request.session.clear()
    return {"message": "Logged out"}

@router.get("/me")
async def me(request: Request):
    if request.session.get("user_id") is None:
        raise AuthorizationError("Unauthorized")

    user = await get_session_user(request)
    if user is None:
        raise NotFoundError("User not found")
    return {"message": "user fetched", "user": user.name, "role": user.role}
