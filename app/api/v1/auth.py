import asyncio
import logging

from fastapi import APIRouter, Depends, Request, status

from app.api.deps import get_user_store
from app.core.rate_limit import auth_rate_limit
from app.core.security import get_current_user_id, issue_token
from app.core.user_store import UserStore
from app.schemas.auth import AuthPayload, LoginRequest, RegisterRequest
from app.schemas.common import envelope

router = APIRouter(prefix="/auth")
logger = logging.getLogger(__name__)


@router.post("/register", status_code=status.HTTP_201_CREATED)
@auth_rate_limit()
async def register(request: Request, payload: RegisterRequest, users: UserStore = Depends(get_user_store)):
    user = await asyncio.to_thread(users.create, name=payload.name, email=payload.email, password=payload.password)
    token = issue_token(user.id, request.app.state.settings)
    return envelope(AuthPayload(token=token, user=user), message="User registered successfully")


@router.post("/login")
@auth_rate_limit()
async def login(request: Request, payload: LoginRequest, users: UserStore = Depends(get_user_store)):
    user = await asyncio.to_thread(users.authenticate, email=payload.email, password=payload.password)
    token = issue_token(user.id, request.app.state.settings)
    logger.info("user_login user_id=%s", user.id)
    return envelope(AuthPayload(token=token, user=user), message="Login successful")


@router.get("/profile")
async def profile(user_id: str = Depends(get_current_user_id), users: UserStore = Depends(get_user_store)):
    user = await asyncio.to_thread(users.get, user_id)
    return envelope(user)


@router.post("/logout")
async def logout(user_id: str = Depends(get_current_user_id)):
    # Tokens are stateless; the client discards its copy.
    logger.info("user_logout user_id=%s", user_id)
    return envelope(message="Logout successful")
