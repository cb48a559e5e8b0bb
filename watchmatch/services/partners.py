"""Partner request lifecycle: pending -> accepted | rejected."""

from loguru import logger

from watchmatch.core.errors import InvalidInput, NotFound
from watchmatch.models import PartnerRequest, PartnerRequestCreate, PartnerRequestStatus, User
from watchmatch.storage import Storage


class PartnerService:
    def __init__(self, storage: Storage) -> None:
        self._storage = storage

    def send_request(self, sender: User, receiver_username: str) -> PartnerRequest:
        receiver = self._storage.get_user_by_username(receiver_username)
        if receiver is None:
            raise NotFound("User not found")
        if receiver.id == sender.id:
            raise InvalidInput("Cannot partner with yourself")
        if sender.partner_id is not None and sender.partner_id == receiver.id:
            raise InvalidInput("You are already paired with this user")

        request = self._storage.create_partner_request(
            PartnerRequestCreate(sender_id=sender.id, receiver_username=receiver_username)
        )
        logger.info("Partner request {} sent from user {} to {!r}", request.id, sender.id, receiver_username)
        return request

    def list_requests(self, user: User) -> list[PartnerRequest]:
        return self._storage.get_partner_requests(user.id)

    def respond(self, user: User, request_id: int, status: PartnerRequestStatus) -> PartnerRequest:
        if status is PartnerRequestStatus.PENDING:
            raise InvalidInput("Status must be 'accepted' or 'rejected'")

        # Serialize responses so a request can only leave 'pending' once
        with self._storage.atomic():
            request = self._storage.get_partner_request(request_id)
            if request is None:
                raise NotFound(f"Partner request {request_id} not found")
            if request.receiver_username != user.username:
                raise InvalidInput("Only the receiver can respond to this request")
            if request.status.is_terminal:
                raise InvalidInput(f"Request has already been {request.status.value}")

            if status is PartnerRequestStatus.ACCEPTED:
                self._pair(request, user)

            updated = self._storage.update_partner_request(request_id, status)

        logger.info("Partner request {} {} by user {}", request_id, status.value, user.id)
        return updated

    def _pair(self, request: PartnerRequest, receiver: User) -> None:
        sender = self._storage.get_user(request.sender_id)
        if sender is None:
            raise NotFound("Sender no longer exists")
        # Re-read: the receiver may have been paired since authenticating
        receiver = self._storage.get_user(receiver.id) or receiver
        for who in (sender, receiver):
            other = receiver if who is sender else sender
            if who.partner_id is not None and who.partner_id != other.id:
                raise InvalidInput(f"{who.username} is already paired")

        self._storage.pair_users(sender.id, receiver.id)
        logger.info("Paired users {} and {}", sender.id, receiver.id)

    def unpair(self, user: User) -> User:
        with self._storage.atomic():
            current = self._storage.get_user(user.id)
            if current is None:
                raise NotFound("User not found")
            if current.partner_id is None:
                raise InvalidInput("Not paired")
            partner_id = current.partner_id
            updated = self._storage.unpair_user(user.id)
        logger.info("Unpaired users {} and {}", user.id, partner_id)
        return updated
