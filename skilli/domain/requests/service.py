"""
Request service - Business logic for client requests

Request lifecycle:
    open -> in_progress -> completed | cancelled
A request moves to in_progress on its first offer and to completed only when
one of its offers is accepted. completed and cancelled are terminal.
"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import (
    REQUEST_ACTIVE_STATUSES,
    REQUEST_CANCELLED,
    REQUEST_COMPLETED,
    REQUEST_IN_PROGRESS,
    REQUEST_OPEN,
    REQUEST_TERMINAL_STATUSES,
    ServiceRequest,
    User,
)
from ...shared.pagination import PaginationMeta, PaginationParams, paginate
from ...shared.schemas import to_columns
from .repository import RequestRepository
from .schemas import RequestCreate, RequestUpdate

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    REQUEST_OPEN: frozenset({REQUEST_IN_PROGRESS, REQUEST_COMPLETED, REQUEST_CANCELLED}),
    REQUEST_IN_PROGRESS: frozenset({REQUEST_COMPLETED, REQUEST_CANCELLED}),
    REQUEST_COMPLETED: frozenset(),
    REQUEST_CANCELLED: frozenset(),
}


def can_transition(current: str, target: str) -> bool:
    """Whether a request may move from current to target (staying put is always allowed)"""
    return current == target or target in ALLOWED_TRANSITIONS.get(current, frozenset())


def check_budget(budget_min: Optional[float], budget_max: Optional[float]):
    if budget_min is not None and budget_max is not None and budget_min > budget_max:
        raise HTTPException(status_code=400, detail="budgetMin cannot be greater than budgetMax")


class RequestService:
    """Service layer for request business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = RequestRepository()

    def get_request(self, request_id: str) -> ServiceRequest:
        request = self.repo.get_by_id(self.db, request_id)
        if not request:
            raise HTTPException(status_code=404, detail="Request not found")
        return request

    def _get_owned(self, request_id: str, user: User, action: str) -> ServiceRequest:
        request = self.get_request(request_id)
        if request.requester_id != user.id:
            logger.warning(f"⚠️ User {user.id} tried to {action} request {request_id}")
            raise HTTPException(status_code=403, detail=f"You can only {action} your own requests")
        return request

    def create_request(self, data: RequestCreate, user: User) -> ServiceRequest:
        check_budget(data.budgetMin, data.budgetMax)
        request = self.repo.create(
            self.db, user.id, status=REQUEST_OPEN, **to_columns(data, exclude_unset=False)
        )
        logger.info(f"✅ Request {request.id} created by {user.id}")
        return self.get_request(request.id)

    def get_all_requests(
        self,
        params: PaginationParams,
        status: Optional[str] = REQUEST_OPEN,
        request_type: Optional[str] = None,
        skill: Optional[str] = None,
        location: Optional[str] = None,
        min_budget: Optional[float] = None,
        max_budget: Optional[float] = None,
    ) -> tuple[list[ServiceRequest], PaginationMeta]:
        query = self.repo.search(
            self.db,
            status=status,
            request_type=request_type,
            skill=skill,
            location=location,
            min_budget=min_budget,
            max_budget=max_budget,
        )
        return paginate(query, params)

    def get_my_requests(self, user: User) -> list[ServiceRequest]:
        return self.repo.list_for_requester(self.db, user.id)

    def _raise_stale(self, request_id: str, action: str):
        """The conditional write matched nothing: report the status that beat us"""
        self.db.rollback()
        current = self.repo.get_by_id(self.db, request_id)
        status = current.status if current else "deleted"
        logger.warning(f"⚠️ Request {request_id} became {status} before the {action} was applied")
        raise HTTPException(status_code=400, detail=f"Cannot {action} a {status} request")

    def update_request(self, request_id: str, data: RequestUpdate, user: User) -> ServiceRequest:
        request = self._get_owned(request_id, user, "update")

        if request.status in REQUEST_TERMINAL_STATUSES:
            raise HTTPException(status_code=400, detail=f"Cannot update a {request.status} request")

        updates = {key: value for key, value in to_columns(data).items() if value is not None}
        check_budget(
            updates.get("budget_min", request.budget_min),
            updates.get("budget_max", request.budget_max),
        )

        new_status = updates.get("status")
        if new_status and new_status != request.status:
            if new_status == REQUEST_COMPLETED:
                raise HTTPException(
                    status_code=400, detail="A request is completed by accepting one of its offers"
                )
            if not can_transition(request.status, new_status):
                raise HTTPException(
                    status_code=400,
                    detail=f"Cannot change request status from {request.status} to {new_status}",
                )

        # Re-checked in the UPDATE itself: an accept or cancel may have landed since the read
        from_statuses = [
            status
            for status in REQUEST_ACTIVE_STATUSES
            if not new_status or can_transition(status, new_status)
        ]
        if updates:
            try:
                if self.repo.update_if_status(self.db, request_id, from_statuses, **updates) != 1:
                    self._raise_stale(request_id, "update")
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise
        return self.get_request(request_id)

    def cancel_request(self, request_id: str, user: User) -> ServiceRequest:
        request = self._get_owned(request_id, user, "cancel")
        if request.status in REQUEST_TERMINAL_STATUSES:
            raise HTTPException(status_code=400, detail=f"Cannot cancel a {request.status} request")

        try:
            cancelled = self.repo.update_if_status(
                self.db, request_id, REQUEST_ACTIVE_STATUSES, status=REQUEST_CANCELLED
            )
            if cancelled != 1:
                self._raise_stale(request_id, "cancel")
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"📥 Request {request_id} cancelled")
        return self.get_request(request_id)

    def delete_request(self, request_id: str, user: User) -> dict:
        request = self._get_owned(request_id, user, "delete")
        self.repo.delete(self.db, request)
        logger.info(f"🗑️ Request {request_id} deleted")
        return {"message": "Request deleted successfully"}
