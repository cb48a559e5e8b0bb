import enum
from typing import Optional

from sqlmodel import Field, SQLModel


class PartnerRequestStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not PartnerRequestStatus.PENDING


class PartnerRequest(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    sender_id: int = Field(foreign_key="user.id", index=True)
    # Resolved against the users table at read/response time
    receiver_username: str = Field(index=True)
    status: PartnerRequestStatus = Field(default=PartnerRequestStatus.PENDING)


class PartnerRequestCreate(SQLModel):
    sender_id: int
    receiver_username: str = Field(min_length=1)
    # Ignored: new requests always start pending
    status: Optional[PartnerRequestStatus] = None
