from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from pydantic import BaseModel

from terrain.services.errors import AuthenticationError
from web.deps import SESSION_ACCOUNT_KEY, get_account_service, get_current_account, get_subscription_service, success

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth")


class SignupRequest(BaseModel):
    email: str = ""
    password: str = ""
    display_name: str = ""


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


def _serialize_account(account, plan: str) -> dict:
    return {
        "id": account.uuid,
        "email": account.email,
        "displayName": account.display_name,
        "plan": plan,
        "onTeam": account.team_owner_id is not None,
    }


@router.post("/signup")
async def signup(request: Request, body: SignupRequest):
    logger.info("POST /api/auth/signup")
    service = get_account_service(request)
    account = service.register(body.email, body.password, body.display_name)

    request.session.clear()
    request.session[SESSION_ACCOUNT_KEY] = account.id
    logger.info("Account %s signed up", account.email)

    plan = get_subscription_service(request).get_plan(account.id)
    return success(_serialize_account(account, plan.value))


@router.post("/login")
async def login(request: Request, body: LoginRequest):
    service = get_account_service(request)
    account = service.authenticate(body.email, body.password)
    if account is None:
        logger.warning("Failed login attempt for email=%s", body.email)
        raise AuthenticationError("Invalid email or password.")

    request.session.clear()
    request.session[SESSION_ACCOUNT_KEY] = account.id
    logger.info("Account %s logged in", account.email)

    plan = get_subscription_service(request).get_plan(account.id)
    return success(_serialize_account(account, plan.value))


@router.post("/logout")
async def logout(request: Request):
    account_id = request.session.get(SESSION_ACCOUNT_KEY)
    request.session.clear()
    logger.info("Account %s logged out", account_id)
    return success()


@router.get("/me")
async def me(request: Request):
    account = get_current_account(request)
    if account is None:
        raise AuthenticationError()
    plan = get_subscription_service(request).get_plan(account.id)
    return success(_serialize_account(account, plan.value))
