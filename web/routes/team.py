from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Query, Request
from pydantic import BaseModel

from terrain.services.errors import AuthenticationError, ValidationError
from web.deps import get_current_account, get_team_service, success

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/team")


class InviteRequest(BaseModel):
    email: str | None = None


async def _read_invite(request: Request) -> InviteRequest:
    """Parse the POST body leniently; a missing or unreadable body means no email."""
    try:
        payload = await request.json()
        return InviteRequest.model_validate(payload)
    except ValueError:
        logger.info("POST /api/team: unreadable body, treating email as missing")
        return InviteRequest()


@router.get("")
async def team_list(request: Request, background_tasks: BackgroundTasks):
    owner = get_current_account(request)
    logger.info("GET /api/team: owner=%s", owner.id if owner else None)
    service = get_team_service(request, background_tasks)
    team = service.list_team(owner)
    return success(team.model_dump(mode="json"))


@router.post("")
async def team_invite(request: Request, background_tasks: BackgroundTasks):
    owner = get_current_account(request)
    logger.info("POST /api/team: owner=%s", owner.id if owner else None)
    # Auth and plan errors take precedence over payload errors.
    body = await _read_invite(request)
    service = get_team_service(request, background_tasks)
    result = service.invite_member(owner, body.email)
    return success(result.model_dump(mode="json", by_alias=True))


@router.delete("")
async def team_remove(
    request: Request,
    background_tasks: BackgroundTasks,
    member_id: str | None = Query(default=None, alias="memberId"),
    invitation_id: str | None = Query(default=None, alias="invitationId"),
):
    owner = get_current_account(request)
    logger.info(
        "DELETE /api/team: owner=%s member=%s invitation=%s",
        owner.id if owner else None,
        member_id,
        invitation_id,
    )
    if owner is None:
        raise AuthenticationError()

    service = get_team_service(request, background_tasks)
    if member_id:
        service.remove_member(owner, member_id)
        return success()
    if invitation_id:
        service.revoke_invitation(owner, invitation_id)
        return success()
    raise ValidationError("memberId or invitationId required.")
