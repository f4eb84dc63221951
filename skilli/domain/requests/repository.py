"""Request repository - Database operations for requests"""

from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Query, Session, joinedload, selectinload

from ...models import Offer, ServiceRequest, User
from ...shared.filters import json_list_contains


class RequestRepository:
    """Repository for request database operations"""

    @staticmethod
    def get_by_id(db: Session, request_id: str) -> Optional[ServiceRequest]:
        return (
            db.query(ServiceRequest)
            .options(
                joinedload(ServiceRequest.requester),
                selectinload(ServiceRequest.offers)
                .joinedload(Offer.provider)
                .joinedload(User.profile),
            )
            .filter(ServiceRequest.id == request_id)
            .first()
        )

    @staticmethod
    def get_for_update(db: Session, request_id: str) -> Optional[ServiceRequest]:
        """Row-locking read (SELECT ... FOR UPDATE where the backend supports it)"""
        return (
            db.query(ServiceRequest)
            .filter(ServiceRequest.id == request_id)
            .with_for_update()
            .populate_existing()
            .first()
        )

    @staticmethod
    def create(db: Session, requester_id: str, **data) -> ServiceRequest:
        request = ServiceRequest(requester_id=requester_id, **data)
        db.add(request)
        db.commit()
        db.refresh(request)
        return request

    @staticmethod
    def update_if_status(db: Session, request_id: str, statuses, **values) -> int:
        """Conditional update applied only while the request is in one of `statuses`"""
        result = db.execute(
            update(ServiceRequest)
            .where(ServiceRequest.id == request_id, ServiceRequest.status.in_(statuses))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    @staticmethod
    def delete(db: Session, request: ServiceRequest) -> None:
        db.delete(request)
        db.commit()

    @staticmethod
    def search(
        db: Session,
        status: Optional[str] = None,
        request_type: Optional[str] = None,
        skill: Optional[str] = None,
        location: Optional[str] = None,
        min_budget: Optional[float] = None,
        max_budget: Optional[float] = None,
    ) -> Query:
        """Filtered query, newest first; the caller paginates it"""
        query = db.query(ServiceRequest)

        if status:
            query = query.filter(ServiceRequest.status == status)
        if request_type:
            query = query.filter(ServiceRequest.request_type == request_type)
        if skill:
            query = query.filter(json_list_contains(ServiceRequest.skills, skill))
        if location:
            query = query.filter(ServiceRequest.location.ilike(f"%{location}%"))
        if min_budget is not None:
            query = query.filter(ServiceRequest.budget_max >= min_budget)
        if max_budget is not None:
            query = query.filter(ServiceRequest.budget_min <= max_budget)

        return query.options(
            joinedload(ServiceRequest.requester), selectinload(ServiceRequest.offers)
        ).order_by(ServiceRequest.created_at.desc())

    @staticmethod
    def list_for_requester(db: Session, requester_id: str) -> list[ServiceRequest]:
        return (
            db.query(ServiceRequest)
            .options(joinedload(ServiceRequest.requester), selectinload(ServiceRequest.offers))
            .filter(ServiceRequest.requester_id == requester_id)
            .order_by(ServiceRequest.created_at.desc())
            .all()
        )
