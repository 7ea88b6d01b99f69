"""Registration and login routes."""

from fastapi import APIRouter, HTTPException

from nooklet.dependencies import AuthServiceDep
from nooklet.errors import AuthError
from nooklet.models import AccessToken, LoginRequest, RegisteredUser, RegisterRequest

router = APIRouter()


@router.post("/register", response_model=RegisteredUser, status_code=201)
async def register(body: RegisterRequest, service: AuthServiceDep):
    try:
        user, profile = await service.register(body)
    except AuthError as exc:
        raise HTTPException(exc.status_code, {"code": exc.code, "message": exc.message}) from exc
    return RegisteredUser(id=user.id, email=user.email, profile_id=profile.id)


@router.post("/login", response_model=AccessToken)
async def login(body: LoginRequest, service: AuthServiceDep):
    try:
        return await service.login(body)
    except AuthError as exc:
        raise HTTPException(exc.status_code, {"code": exc.code, "message": exc.message}) from exc
