"""Offer repository - Database operations for offers"""

from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session, joinedload, selectinload

from ...models import (
    OFFER_ACCEPTED,
    OFFER_PENDING,
    OFFER_REJECTED,
    REQUEST_COMPLETED,
    REQUEST_TERMINAL_STATUSES,
    Offer,
    ServiceRequest,
    User,
)


def _with_relations(query):
    return query.options(
        joinedload(Offer.provider).joinedload(User.profile),
        joinedload(Offer.request).joinedload(ServiceRequest.requester),
        joinedload(Offer.request).selectinload(ServiceRequest.offers),
    )


class OfferRepository:
    """Repository for offer database operations"""

    @staticmethod
    def get_by_id(db: Session, offer_id: str) -> Optional[Offer]:
        return _with_relations(db.query(Offer)).filter(Offer.id == offer_id).first()

    @staticmethod
    def get_for_request_and_provider(
        db: Session, request_id: str, provider_id: str
    ) -> Optional[Offer]:
        return (
            db.query(Offer)
            .filter(Offer.request_id == request_id, Offer.provider_id == provider_id)
            .first()
        )

    @staticmethod
    def list_for_request(db: Session, request_id: str) -> list[Offer]:
        return (
            db.query(Offer)
            .options(joinedload(Offer.provider).joinedload(User.profile))
            .filter(Offer.request_id == request_id)
            .order_by(Offer.created_at.desc())
            .all()
        )

    @staticmethod
    def list_for_provider(db: Session, provider_id: str) -> list[Offer]:
        return (
            _with_relations(db.query(Offer))
            .filter(Offer.provider_id == provider_id)
            .order_by(Offer.created_at.desc())
            .all()
        )

    @staticmethod
    def add(db: Session, **data) -> Offer:
        offer = Offer(**data)
        db.add(offer)
        return offer

    @staticmethod
    def set_status_if_pending(db: Session, offer_id: str, status: str) -> int:
        """Conditional pending -> status update; returns the number of rows changed"""
        result = db.execute(
            update(Offer)
            .where(Offer.id == offer_id, Offer.status == OFFER_PENDING)
            .values(status=status)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    @staticmethod
    def reject_pending_siblings(db: Session, request_id: str, accepted_offer_id: str) -> int:
        result = db.execute(
            update(Offer)
            .where(
                Offer.request_id == request_id,
                Offer.id != accepted_offer_id,
                Offer.status == OFFER_PENDING,
            )
            .values(status=OFFER_REJECTED)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    @staticmethod
    def complete_request(db: Session, request_id: str) -> int:
        """Conditional on the request not being terminal yet"""
        result = db.execute(
            update(ServiceRequest)
            .where(
                ServiceRequest.id == request_id,
                ServiceRequest.status.notin_(REQUEST_TERMINAL_STATUSES),
            )
            .values(status=REQUEST_COMPLETED)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    @staticmethod
    def accept(db: Session, offer_id: str) -> int:
        return OfferRepository.set_status_if_pending(db, offer_id, OFFER_ACCEPTED)
