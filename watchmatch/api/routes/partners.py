from typing import Any, List

from fastapi import APIRouter

from watchmatch.api import deps
from watchmatch.schemas.msg import Msg
from watchmatch.schemas.partner import PartnerRequestIn, PartnerRequestRead, PartnerRespondIn

router = APIRouter()


@router.post("/request", response_model=PartnerRequestRead)
def send_partner_request(
    service: deps.PartnerServiceDep,
    current_user: deps.CurrentUser,
    body: PartnerRequestIn,
) -> Any:
    """
    Ask another user, by username, to become your partner.
    """
    return service.send_request(current_user, body.receiver_username)


@router.get("/requests", response_model=List[PartnerRequestRead])
def list_partner_requests(
    service: deps.PartnerServiceDep,
    current_user: deps.CurrentUser,
) -> Any:
    """
    Requests sent by you or addressed to your current username.
    """
    return service.list_requests(current_user)


@router.post("/request/{request_id}/respond", response_model=PartnerRequestRead)
def respond_to_partner_request(
    service: deps.PartnerServiceDep,
    current_user: deps.CurrentUser,
    request_id: int,
    body: PartnerRespondIn,
) -> Any:
    """
    Accept or reject a pending request. Accepting pairs both users.
    """
    return service.respond(current_user, request_id, body.as_status)


@router.post("/unpair", response_model=Msg)
def unpair(
    service: deps.PartnerServiceDep,
    current_user: deps.CurrentUser,
) -> Any:
    """
    Unpair from current partner.
    """
    service.unpair(current_user)
    return {"message": "Unpaired successfully"}
