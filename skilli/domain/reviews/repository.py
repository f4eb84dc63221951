"""Review repository - Database operations for reviews"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Review, User


def _with_relations(query):
    return query.options(
        joinedload(Review.reviewer).joinedload(User.profile),
        joinedload(Review.provider),
        joinedload(Review.session),
    )


class ReviewRepository:
    """Repository for review database operations"""

    @staticmethod
    def get_by_id(db: Session, review_id: str) -> Optional[Review]:
        return _with_relations(db.query(Review)).filter(Review.id == review_id).first()

    @staticmethod
    def get_for_reviewer_and_session(
        db: Session, reviewer_id: str, session_id: str
    ) -> Optional[Review]:
        return (
            _with_relations(db.query(Review))
            .filter(Review.reviewer_id == reviewer_id, Review.session_id == session_id)
            .first()
        )

    @staticmethod
    def add(db: Session, **data) -> Review:
        review = Review(**data)
        db.add(review)
        return review

    @staticmethod
    def list_by(db: Session, **filters) -> list[Review]:
        """Newest first, e.g. list_by(db, provider_id=...)"""
        return (
            _with_relations(db.query(Review))
            .filter_by(**filters)
            .order_by(Review.created_at.desc())
            .all()
        )

    @staticmethod
    def ratings_for_provider(db: Session, provider_id: str) -> list[int]:
        return [r for (r,) in db.query(Review.rating).filter(Review.provider_id == provider_id)]

    @staticmethod
    def ratings_for_session(db: Session, session_id: str) -> list[int]:
        return [r for (r,) in db.query(Review.rating).filter(Review.session_id == session_id)]
