"""
Post repository — author-scoped writes, public reads, listing and search.
"""

from __future__ import annotations

import logging

from sqlalchemy import select

from app.core.exceptions import ErrorKind
from app.core.result import Err, Ok, Result
from app.models.post import Post
from app.services.ownership import OwnedRepository
from app.services.pagination import Page, PageRequest, paginate
from app.services.search import SEARCH_CANDIDATE_LIMIT, SearchHit, search_posts

logger = logging.getLogger(__name__)


class PostRepository(OwnedRepository[Post]):
    model = Post
    owner_field = "author_id"
    resource_name = "Post"

    async def list_for_author(self, author_id: int, category: str | None = None) -> list[Post]:
        if category is not None:
            return await self.list_for_owner(author_id, Post.category == category)
        return await self.list_for_owner(author_id)

    async def list_published(self, request: PageRequest) -> Page[Post]:
        """Windowed listing of published posts, newest first."""
        stmt = self._newest_first(select(Post).where(Post.published.is_(True)))
        return await paginate(self.session, stmt, request)

    async def search(
        self, query: str, limit: int, candidate_limit: int = SEARCH_CANDIDATE_LIMIT
    ) -> list[SearchHit]:
        """Ranked search over published posts; returns a fixed-size list, no paging."""
        return await search_posts(self.session, query, limit, candidate_limit)

    async def get_by_id(self, post_id: int, viewer_id: int | None = None) -> Result[Post]:
        """Public read that also counts a view.

        Unpublished posts are only visible to their author. The view counter
        is a read-modify-write on the loaded row; concurrent reads of the same
        post can lose increments.
        """
        result = await self.session.execute(select(Post).where(Post.id == post_id))
        post = result.unique().scalar_one_or_none()
        if post is None or (not post.published and post.author_id != viewer_id):
            return Err(ErrorKind.NOT_FOUND, "Post not found")

        post.views += 1
        await self.session.commit()
        logger.debug("Post %d viewed (%d views)", post.id, post.views)
        return Ok(post)
