from typing import Literal

from pydantic import Field

from watchmatch.models import PartnerRequestStatus
from watchmatch.schemas.base import CamelModel


class PartnerRequestIn(CamelModel):
    receiver_username: str = Field(min_length=1)


class PartnerRespondIn(CamelModel):
    status: Literal["accepted", "rejected"]

    @property
    def as_status(self) -> PartnerRequestStatus:
        return PartnerRequestStatus(self.status)


class PartnerRequestRead(CamelModel):
    id: int
    sender_id: int
    receiver_username: str
    status: PartnerRequestStatus
