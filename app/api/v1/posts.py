"""
Post routes: public listing/reading, authenticated create, owner-only update/delete.

Routes are registered from POST_ROUTES in order and FastAPI dispatches to the first
match, so fixed paths such as "/user/me" must stay ahead of "/{post_id}".
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.api.v1.errors import http_error
from app.core.database import get_db
from app.core.errors import BlogError
from app.schemas.auth import CurrentUser
from app.schemas.posts import (
    MessageResponse,
    PostCreateRequest,
    PostMutationResponse,
    PostOut,
    PostResponse,
    PostsResponse,
    PostUpdateRequest,
)
from app.services import posts as post_store
from app.services.posts import PostPage

logger = logging.getLogger(__name__)
router = APIRouter()


def _page_response(page: PostPage) -> PostsResponse:
    return PostsResponse(
        posts=[PostOut.model_validate(p) for p in page.items],
        total_pages=page.total_pages,
        current_page=page.current_page,
        total=page.total_count,
    )


def _empty_listing() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=PostsResponse.empty().model_dump(by_alias=True),
    )


def list_my_posts(
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
    page: Annotated[str | None, Query()] = None,
    limit: Annotated[str | None, Query()] = None,
) -> PostsResponse | JSONResponse:
    """Newest-first page of the authenticated user's own posts."""
    try:
        result = post_store.list_posts_by_author(
            db,
            user.id,
            page=page or post_store.DEFAULT_PAGE,
            page_size=limit or post_store.DEFAULT_PAGE_SIZE,
        )
    except Exception:
        logger.exception("Listing posts failed", extra={"user_id": user.id})
        return _empty_listing()
    return _page_response(result)


def list_posts(
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[str | None, Query()] = None,
    limit: Annotated[str | None, Query()] = None,
    search: Annotated[str, Query()] = "",
) -> PostsResponse | JSONResponse:
    """
    Newest-first page of all posts.

    - **page**: 1-based page number (default 1).
    - **limit**: page size, clamped to 1..50 (default 10).
    - **search**: case-insensitive substring of the title or author username.

    An internal failure returns HTTP 500 with an empty listing in the usual shape.
    """
    try:
        result = post_store.list_posts(
            db,
            page=page or post_store.DEFAULT_PAGE,
            page_size=limit or post_store.DEFAULT_PAGE_SIZE,
            search=search,
        )
    except Exception:
        logger.exception("Listing posts failed")
        return _empty_listing()
    return _page_response(result)


def create_post(
    body: PostCreateRequest,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> PostMutationResponse:
    """Create a post owned by the authenticated user."""
    try:
        post = post_store.create_post(
            db,
            author_id=user.id,
            author_username=user.username,
            title=body.title,
            content=body.content,
            image_url=body.image_url,
        )
    except BlogError as e:
        raise http_error(e) from e
    return PostMutationResponse(
        message="Post created successfully",
        post=PostOut.model_validate(post),
    )


def get_post(
    post_id: str,
    db: Annotated[Session, Depends(get_db)],
) -> PostResponse:
    """Return one post. 400 if the id is malformed, 404 if there is no such post."""
    try:
        post = post_store.get_post(db, post_store.parse_post_id(post_id))
    except BlogError as e:
        raise http_error(e) from e
    return PostResponse(post=PostOut.model_validate(post))


def update_post(
    post_id: str,
    body: PostUpdateRequest,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> PostMutationResponse:
    """Apply the fields present in the body to a post the caller owns."""
    patch = {name: getattr(body, name) for name in body.model_fields_set}
    try:
        post = post_store.update_post(
            db,
            post_store.parse_post_id(post_id),
            author_id=user.id,
            patch=patch,
        )
    except BlogError as e:
        raise http_error(e) from e
    return PostMutationResponse(
        message="Post updated successfully",
        post=PostOut.model_validate(post),
    )


def delete_post(
    post_id: str,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageResponse:
    """Delete a post the caller owns. Deleting it again returns 404."""
    try:
        post_store.delete_post(db, post_store.parse_post_id(post_id), author_id=user.id)
    except BlogError as e:
        raise http_error(e) from e
    return MessageResponse(message="Post deleted successfully")


# (method, path, endpoint, response_model, status_code); first match wins.
POST_ROUTES = (
    ("GET", "/user/me", list_my_posts, PostsResponse, status.HTTP_200_OK),
    ("GET", "", list_posts, PostsResponse, status.HTTP_200_OK),
    ("POST", "", create_post, PostMutationResponse, status.HTTP_201_CREATED),
    ("GET", "/{post_id}", get_post, PostResponse, status.HTTP_200_OK),
    ("PUT", "/{post_id}", update_post, PostMutationResponse, status.HTTP_200_OK),
    ("DELETE", "/{post_id}", delete_post, MessageResponse, status.HTTP_200_OK),
)

for _method, _path, _endpoint, _response_model, _status_code in POST_ROUTES:
    router.add_api_route(
        _path,
        _endpoint,
        methods=[_method],
        response_model=_response_model,
        status_code=_status_code,
    )
