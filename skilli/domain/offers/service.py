"""
Offer service - providers bid on requests, request owners accept or reject

Offer lifecycle:
    pending -> accepted | rejected
Once an offer leaves pending it is immutable. Accepting an offer is a single
transaction: the offer becomes accepted, every other pending offer on the same
request becomes rejected and the request becomes completed.
"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import (
    OFFER_PENDING,
    OFFER_REJECTED,
    REQUEST_IN_PROGRESS,
    REQUEST_OPEN,
    REQUEST_TERMINAL_STATUSES,
    Offer,
    User,
)
from ...shared.schemas import to_columns
from ..notifications.service import NotificationService
from ..requests.repository import RequestRepository
from .repository import OfferRepository
from .schemas import OfferCreate, OfferUpdate

logger = logging.getLogger(__name__)


class OfferService:
    """Service layer for offer business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = OfferRepository()
        self.requests = RequestRepository()
        self.notifications = NotificationService(db)

    def get_offer(self, offer_id: str) -> Offer:
        offer = self.repo.get_by_id(self.db, offer_id)
        if not offer:
            raise HTTPException(status_code=404, detail="Offer not found")
        return offer

    def create_offer(self, data: OfferCreate, user: User) -> Offer:
        request = self.requests.get_by_id(self.db, data.requestId)
        if not request:
            raise HTTPException(status_code=404, detail="Request not found")

        if request.requester_id == user.id:
            raise HTTPException(status_code=403, detail="You cannot offer on your own request")

        if request.status in REQUEST_TERMINAL_STATUSES:
            raise HTTPException(status_code=400, detail=f"Cannot offer on a {request.status} request")

        if not user.is_provider:
            raise HTTPException(status_code=403, detail="Only providers can submit offers")

        if self.repo.get_for_request_and_provider(self.db, request.id, user.id):
            raise HTTPException(
                status_code=409, detail="You have already submitted an offer for this request"
            )

        request_id, requester_id, request_title = request.id, request.requester_id, request.title
        values = to_columns(data, exclude_unset=False)
        values.pop("request_id")

        try:
            self._lock_active_request(request_id)
            offer = self.repo.add(
                self.db, request_id=request_id, provider_id=user.id, status=OFFER_PENDING, **values
            )
            self.db.flush()

            # First offer on an open request starts the negotiation
            started = self.requests.update_if_status(
                self.db, request_id, (REQUEST_OPEN,), status=REQUEST_IN_PROGRESS
            )
            if not started:
                # Not open any more: fine while negotiating, refused once closed
                self._lock_active_request(request_id)
            offer_id = offer.id
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"✅ Offer {offer_id} submitted on request {request_id} by {user.id}")
        self.notifications.notify_requester_of_offer(requester_id, user.name, request_title)
        return self.get_offer(offer_id)

    def _lock_active_request(self, request_id: str):
        locked = self.requests.get_for_update(self.db, request_id)
        if locked is None or locked.status in REQUEST_TERMINAL_STATUSES:
            status = locked.status if locked else "deleted"
            raise HTTPException(status_code=400, detail=f"Cannot offer on a {status} request")
        return locked

    def get_request_offers(self, request_id: str) -> list[Offer]:
        if not self.requests.get_by_id(self.db, request_id):
            raise HTTPException(status_code=404, detail="Request not found")
        return self.repo.list_for_request(self.db, request_id)

    def get_my_offers(self, user: User) -> list[Offer]:
        return self.repo.list_for_provider(self.db, user.id)

    def update_offer(self, offer_id: str, data: OfferUpdate, user: User) -> Offer:
        offer = self.get_offer(offer_id)

        if offer.provider_id != user.id:
            raise HTTPException(status_code=403, detail="You can only update your own offers")
        if offer.status != OFFER_PENDING:
            raise HTTPException(status_code=400, detail=f"Cannot update {offer.status} offer")

        for key, value in to_columns(data).items():
            if value is not None:
                setattr(offer, key, value)
        self.db.commit()
        return self.get_offer(offer_id)

    def accept_offer(self, offer_id: str, user: User) -> Offer:
        offer = self.get_offer(offer_id)
        request = offer.request

        if request.requester_id != user.id:
            raise HTTPException(status_code=403, detail="Only the request owner can accept offers")
        if offer.status != OFFER_PENDING:
            raise HTTPException(status_code=400, detail=f"Cannot accept {offer.status} offer")
        if request.status in REQUEST_TERMINAL_STATUSES:
            raise HTTPException(
                status_code=400, detail=f"Cannot accept offer for {request.status} request"
            )

        provider_id, provider_name = offer.provider_id, offer.provider.name
        requester_id, requester_name = request.requester_id, request.requester.name
        request_id, request_title = request.id, request.title

        try:
            locked = self.requests.get_for_update(self.db, request_id)
            if locked is None or locked.status in REQUEST_TERMINAL_STATUSES:
                status = locked.status if locked else "deleted"
                raise HTTPException(
                    status_code=400, detail=f"Cannot accept offer for {status} request"
                )

            if self.repo.accept(self.db, offer_id) != 1:
                raise HTTPException(status_code=400, detail="Offer is no longer pending")

            rejected = self.repo.reject_pending_siblings(self.db, request_id, offer_id)

            if self.repo.complete_request(self.db, request_id) != 1:
                raise HTTPException(
                    status_code=400, detail="Request was closed while accepting the offer"
                )

            self.db.commit()
        except HTTPException:
            self.db.rollback()
            logger.warning(f"⚠️ Accepting offer {offer_id} lost a race, rolled back")
            raise
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Accepting offer {offer_id} failed, rolled back: {e}")
            raise

        logger.info(
            f"✅ Offer {offer_id} accepted on request {request_id} ({rejected} sibling offers rejected)"
        )

        self.notifications.notify_offer_accepted(
            provider_id=provider_id,
            requester_id=requester_id,
            provider_name=provider_name,
            requester_name=requester_name,
            request_title=request_title,
        )
        return self.get_offer(offer_id)

    def reject_offer(self, offer_id: str, user: User) -> Offer:
        offer = self.get_offer(offer_id)

        if offer.request.requester_id != user.id:
            raise HTTPException(status_code=403, detail="Only the request owner can reject offers")
        if offer.status != OFFER_PENDING:
            raise HTTPException(status_code=400, detail=f"Cannot reject {offer.status} offer")

        if self.repo.set_status_if_pending(self.db, offer_id, OFFER_REJECTED) != 1:
            self.db.rollback()
            raise HTTPException(status_code=400, detail="Offer is no longer pending")
        self.db.commit()
        return self.get_offer(offer_id)

    def delete_offer(self, offer_id: str, user: User) -> dict:
        offer = self.get_offer(offer_id)

        if offer.provider_id != user.id:
            raise HTTPException(status_code=403, detail="You can only delete your own offers")
        if offer.status != OFFER_PENDING:
            raise HTTPException(status_code=400, detail="Can only delete pending offers")

        self.db.delete(offer)
        self.db.commit()
        logger.info(f"🗑️ Offer {offer_id} deleted")
        return {"message": "Offer deleted successfully"}
