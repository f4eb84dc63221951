"""Post repository - Database operations for posts and likes"""

from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Query, Session, joinedload

from ...models import Post, PostLike, User
from ...shared.filters import json_list_contains


class PostRepository:
    """Repository for post database operations"""

    @staticmethod
    def _query(db: Session) -> Query:
        return db.query(Post).options(joinedload(Post.author).joinedload(User.profile))

    @staticmethod
    def get_by_id(db: Session, post_id: str) -> Optional[Post]:
        return PostRepository._query(db).filter(Post.id == post_id).first()

    @staticmethod
    def create(db: Session, **data) -> Post:
        post = Post(**data)
        db.add(post)
        db.commit()
        db.refresh(post)
        return post

    @staticmethod
    def delete(db: Session, post: Post):
        db.delete(post)
        db.commit()

    @staticmethod
    def search(
        db: Session,
        skill: Optional[str] = None,
        category: Optional[str] = None,
        author_id: Optional[str] = None,
    ) -> Query:
        query = PostRepository._query(db)
        if skill:
            query = query.filter(json_list_contains(Post.skills, skill))
        if category:
            query = query.filter(Post.category == category)
        if author_id:
            query = query.filter(Post.author_id == author_id)
        return query.order_by(Post.created_at.desc())

    @staticmethod
    def liked_post_ids(db: Session, user_id: str, post_ids: list[str]) -> set[str]:
        if not post_ids:
            return set()
        rows = (
            db.query(PostLike.post_id)
            .filter(PostLike.user_id == user_id, PostLike.post_id.in_(post_ids))
            .all()
        )
        return {post_id for (post_id,) in rows}

    @staticmethod
    def get_like(db: Session, post_id: str, user_id: str) -> Optional[PostLike]:
        return (
            db.query(PostLike)
            .filter(PostLike.post_id == post_id, PostLike.user_id == user_id)
            .first()
        )

    @staticmethod
    def add_like(db: Session, post_id: str, user_id: str) -> PostLike:
        like = PostLike(post_id=post_id, user_id=user_id)
        db.add(like)
        return like

    @staticmethod
    def bump_like_count(db: Session, post_id: str, delta: int):
        db.execute(
            update(Post)
            .where(Post.id == post_id)
            .values(like_count=Post.like_count + delta)
            .execution_options(synchronize_session=False)
        )
