"""Post service - provider posts and likes"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Post, User
from ...shared.pagination import PaginationMeta, PaginationParams, paginate
from .repository import PostRepository
from .schemas import PostCreate, PostResponse

logger = logging.getLogger(__name__)


class PostService:
    """Service layer for post business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PostRepository()

    def _with_liked(self, posts: list[Post], viewer: Optional[User]) -> list[PostResponse]:
        """Serialize posts with the viewer's isLiked flag (always false for anonymous)"""
        liked: set[str] = set()
        if viewer:
            liked = self.repo.liked_post_ids(self.db, viewer.id, [post.id for post in posts])
        return [
            PostResponse.model_validate(post).model_copy(update={"isLiked": post.id in liked})
            for post in posts
        ]

    def _get_post(self, post_id: str) -> Post:
        post = self.repo.get_by_id(self.db, post_id)
        if not post:
            raise HTTPException(status_code=404, detail="Post not found")
        return post

    def create_post(self, data: PostCreate, user: User) -> PostResponse:
        if not user.is_provider:
            logger.warning(f"⚠️ Non-provider {user.id} tried to publish a post")
            raise HTTPException(status_code=403, detail="Only providers can create posts")

        post = self.repo.create(
            self.db,
            author_id=user.id,
            content=data.content,
            skills=data.skills,
            category=data.category,
        )
        logger.info(f"📝 Post {post.id} published by {user.id}")
        return self._with_liked([self._get_post(post.id)], user)[0]

    def get_all_posts(
        self,
        params: PaginationParams,
        viewer: Optional[User] = None,
        skill: Optional[str] = None,
        category: Optional[str] = None,
        author_id: Optional[str] = None,
    ) -> tuple[list[PostResponse], PaginationMeta]:
        query = self.repo.search(self.db, skill=skill, category=category, author_id=author_id)
        posts, meta = paginate(query, params)
        return self._with_liked(posts, viewer), meta

    def get_post(self, post_id: str, viewer: Optional[User] = None) -> PostResponse:
        return self._with_liked([self._get_post(post_id)], viewer)[0]

    def get_user_posts(self, author_id: str, viewer: Optional[User] = None) -> list[PostResponse]:
        return self._with_liked(self.repo.search(self.db, author_id=author_id).all(), viewer)

    def get_my_posts(self, user: User) -> list[PostResponse]:
        return self.get_user_posts(user.id, user)

    def like_post(self, post_id: str, user: User) -> dict:
        self._get_post(post_id)
        if self.repo.get_like(self.db, post_id, user.id):
            raise HTTPException(status_code=409, detail="You have already liked this post")

        try:
            self.repo.add_like(self.db, post_id, user.id)
            self.db.flush()
            self.repo.bump_like_count(self.db, post_id, 1)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return {"message": "Post liked successfully"}

    def unlike_post(self, post_id: str, user: User) -> dict:
        like = self.repo.get_like(self.db, post_id, user.id)
        if not like:
            raise HTTPException(status_code=404, detail="Like not found")

        try:
            self.db.delete(like)
            self.db.flush()
            self.repo.bump_like_count(self.db, post_id, -1)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return {"message": "Post unliked successfully"}

    def delete_post(self, post_id: str, user: User) -> dict:
        post = self._get_post(post_id)
        if post.author_id != user.id:
            raise HTTPException(status_code=403, detail="You can only delete your own posts")

        self.repo.delete(self.db, post)
        logger.info(f"🗑️ Post {post_id} deleted by {user.id}")
        return {"message": "Post deleted successfully"}
