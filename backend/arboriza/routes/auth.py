"""
Arboriza Backend - Auth Route Handlers
=======================================

What:  POST /api/auth/register and POST /api/auth/login.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from arboriza.database import get_db_session
from arboriza.schemas.auth import Credentials, LoginResponse, RegisterResponse
from arboriza.schemas.common import ErrorResponse
from arboriza.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/register",
    status_code=201,
    response_model=RegisterResponse,
    responses={
        400: {"description": "Missing fields or username taken", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Register a user",
)
async def register(
    body: Credentials,
    db: AsyncSession = Depends(get_db_session),
) -> RegisterResponse:
    user = await auth_service.register(db, body.username, body.password)
    return RegisterResponse(user=user)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"description": "Missing fields", "model": ErrorResponse},
        401: {"description": "Wrong password", "model": ErrorResponse},
        404: {"description": "Unknown username", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Check a username/password pair",
    description="No session or token is issued; the client re-authenticates on each call.",
)
async def login(
    body: Credentials,
    db: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    user = await auth_service.login(db, body.username, body.password)
    return LoginResponse(user=user)
