"""
Post endpoints.

- Listing and single reads are public (single reads use optional auth).
- Create / update / delete require login and only work on your own posts.
- ``GET /posts`` runs in one of two modes: a non-blank ``search`` switches
  from windowed pagination to ranked search.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.api.v1.deps import (get_current_user, get_optional_user, get_post_repository,
                             get_settings)
from app.core.config import Settings
from app.core.result import unwrap
from app.models.post import Post
from app.models.user import User
from app.schemas.post import (Category, PaginationRead, PostCreate, PostDetail, PostPage,
                              PostRead, PostSearchResults, PostUpdate, SearchResult)
from app.schemas.task import DeleteResponse
from app.services.pagination import PageRequest
from app.services.posts import PostRepository

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=PostPage | PostSearchResults)
async def list_posts(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1),
    search: str | None = Query(default=None, max_length=200),
    repo: PostRepository = Depends(get_post_repository),
    settings: Settings = Depends(get_settings),
) -> PostPage | PostSearchResults:
    term = search.strip() if search else ""
    if term:
        hits = await repo.search(
            term, settings.SEARCH_RESULT_LIMIT, settings.SEARCH_CANDIDATE_LIMIT
        )
        return PostSearchResults(
            query=term,
            posts=[
                SearchResult(**PostRead.model_validate(hit.post).model_dump(), score=round(hit.score, 4))
                for hit in hits
            ],
        )

    window = PageRequest(page=page, limit=min(limit, settings.MAX_PAGE_SIZE))
    result = await repo.list_published(window)
    return PostPage(
        posts=[PostRead.model_validate(p) for p in result.items],
        pagination=PaginationRead.model_validate(result.info),
    )


@router.get("/my/posts", response_model=list[PostRead])
async def my_posts(
    category: Category | None = None,
    current_user: User = Depends(get_current_user),
    repo: PostRepository = Depends(get_post_repository),
) -> list[Post]:
    """All of the caller's posts, published or not, newest first."""
    return await repo.list_for_author(current_user.id, category)


@router.get("/{post_id}", response_model=PostDetail)
async def get_post(
    post_id: int,
    viewer: User | None = Depends(get_optional_user),
    repo: PostRepository = Depends(get_post_repository),
) -> PostDetail:
    viewer_id = viewer.id if viewer is not None else None
    post = unwrap(await repo.get_by_id(post_id, viewer_id=viewer_id))
    return PostDetail(
        **PostRead.model_validate(post).model_dump(),
        is_author=viewer_id is not None and viewer_id == post.author_id,
    )


@router.post("", response_model=PostRead, status_code=201)
async def create_post(
    body: PostCreate,
    current_user: User = Depends(get_current_user),
    repo: PostRepository = Depends(get_post_repository),
) -> Post:
    return await repo.create(current_user.id, body.model_dump())


@router.put("/{post_id}", response_model=PostRead)
async def update_post(
    post_id: int,
    body: PostUpdate,
    current_user: User = Depends(get_current_user),
    repo: PostRepository = Depends(get_post_repository),
) -> Post:
    return unwrap(await repo.update(post_id, current_user.id, body.model_dump(exclude_unset=True)))


@router.delete("/{post_id}", response_model=DeleteResponse)
async def delete_post(
    post_id: int,
    current_user: User = Depends(get_current_user),
    repo: PostRepository = Depends(get_post_repository),
) -> DeleteResponse:
    unwrap(await repo.remove(post_id, current_user.id))
    return DeleteResponse(success=True, message="Post deleted successfully")
