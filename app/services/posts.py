"""Post store: validated create/read/update/delete plus paginated, searchable listings."""

import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from app.core.errors import (
    ForbiddenError,
    InvalidIdentifierError,
    NotFoundError,
    ValidationError,
)
from app.models.base import utcnow
from app.models.post import Post

logger = logging.getLogger(__name__)

TITLE_MIN_LEN = 5
TITLE_MAX_LEN = 120
CONTENT_MIN_LEN = 50
IMAGE_URL_PATTERN = re.compile(r"^https?://.+\.(jpg|jpeg|png|webp|gif)$", re.IGNORECASE)

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50

# Largest id a BIGINT/INTEGER primary key can hold; anything above cannot exist.
_MAX_ID = 2**63 - 1

UPDATABLE_FIELDS = ("title", "content", "image_url")


@dataclass(frozen=True)
class PostPage:
    """One page of posts plus the metadata needed to render pagination."""

    items: list[Post]
    current_page: int
    total_pages: int
    total_count: int


def parse_post_id(raw: str | int) -> int:
    """Return the integer id, or raise InvalidIdentifierError if raw is not a well-formed positive id."""
    if isinstance(raw, int) and not isinstance(raw, bool):
        value = raw
    else:
        text = str(raw).strip()
        if not text.isdigit() or not text.isascii():
            raise InvalidIdentifierError("Invalid post ID format")
        value = int(text)
    if value < 1 or value > _MAX_ID:
        raise InvalidIdentifierError("Invalid post ID format")
    return value


def coerce_page(value: Any) -> int:
    """Page numbers start at 1; anything unparseable means the first page."""
    try:
        page = int(value)
    except (TypeError, ValueError):
        return DEFAULT_PAGE
    return max(1, page)


def clamp_page_size(value: Any) -> int:
    """Page size is clamped to [1, MAX_PAGE_SIZE]; unparseable values use the default."""
    try:
        size = int(value)
    except (TypeError, ValueError):
        return DEFAULT_PAGE_SIZE
    return min(MAX_PAGE_SIZE, max(1, size))


def _clean(value: str | None) -> str | None:
    return value.strip() if isinstance(value, str) else value


def validate_post_fields(title: str | None, content: str | None, image_url: str | None) -> list[str]:
    """Return every violated post field rule. Values are expected to be trimmed already."""
    errors: list[str] = []
    if not title:
        errors.append("Title is required")
    elif len(title) < TITLE_MIN_LEN:
        errors.append(f"Title must be at least {TITLE_MIN_LEN} characters")
    elif len(title) > TITLE_MAX_LEN:
        errors.append(f"Title cannot exceed {TITLE_MAX_LEN} characters")

    if not content:
        errors.append("Content is required")
    elif len(content) < CONTENT_MIN_LEN:
        errors.append(f"Content must be at least {CONTENT_MIN_LEN} characters")

    if image_url and not IMAGE_URL_PATTERN.match(image_url):
        errors.append("Please provide a valid image URL")
    return errors


def create_post(
    db: Session,
    author_id: int,
    author_username: str,
    title: str | None,
    content: str | None,
    image_url: str | None = None,
) -> Post:
    """Validate and insert a post owned by author_id. Raises ValidationError on any rule violation."""
    title = _clean(title)
    content = _clean(content)
    image_url = _clean(image_url) or None

    errors = validate_post_fields(title, content, image_url)
    if errors:
        raise ValidationError(errors)

    post = Post(
        title=title,
        content=content,
        image_url=image_url,
        username=author_username,
        user_id=author_id,
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info("Post created", extra={"post_id": post.id, "user_id": author_id})
    return post


def get_post(db: Session, post_id: int) -> Post:
    """Return the post or raise NotFoundError."""
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    return post


def _paginate(query: Query, page: Any, page_size: Any) -> PostPage:
    current_page = coerce_page(page)
    size = clamp_page_size(page_size)

    total = query.order_by(None).count()
    offset = (current_page - 1) * size
    if offset >= total:
        # Past the last page; the offset may not even fit a database integer.
        return PostPage(
            items=[],
            current_page=current_page,
            total_pages=math.ceil(total / size),
            total_count=total,
        )
    items = (
        query.order_by(Post.created_at.desc(), Post.id.desc())
        .offset(offset)
        .limit(size)
        .all()
    )
    return PostPage(
        items=items,
        current_page=current_page,
        total_pages=math.ceil(total / size),
        total_count=total,
    )


def list_posts(
    db: Session,
    page: Any = DEFAULT_PAGE,
    page_size: Any = DEFAULT_PAGE_SIZE,
    search: str | None = None,
) -> PostPage:
    """
    Newest-first page of all posts.

    A non-empty search term keeps posts whose title or author username contains it,
    case-insensitively (plain substring match; LIKE wildcards in the term are literal).
    """
    query = db.query(Post)
    term = (search or "").strip()
    if term:
        query = query.filter(
            or_(
                Post.title.icontains(term, autoescape=True),
                Post.username.icontains(term, autoescape=True),
            )
        )
    return _paginate(query, page, page_size)


def list_posts_by_author(
    db: Session,
    author_id: int,
    page: Any = DEFAULT_PAGE,
    page_size: Any = DEFAULT_PAGE_SIZE,
) -> PostPage:
    """Newest-first page of one author's posts."""
    return _paginate(db.query(Post).filter(Post.user_id == author_id), page, page_size)


def _get_owned_post(db: Session, post_id: int, author_id: int, action: str) -> Post:
    post = get_post(db, post_id)
    if post.user_id != author_id:
        logger.warning(
            "Rejected %s of post owned by another user",
            action,
            extra={"post_id": post_id, "user_id": author_id},
        )
        raise ForbiddenError(f"Access denied. You can only {action} your own posts.")
    return post


def update_post(
    db: Session,
    post_id: int,
    author_id: int,
    patch: Mapping[str, str | None],
) -> Post:
    """
    Apply the fields present in patch (title, content, image_url) to an owned post.

    Raises NotFoundError, ForbiddenError when author_id is not the owner, or ValidationError
    if the resulting values break a field rule. The post is left untouched on any failure.
    """
    post = _get_owned_post(db, post_id, author_id, "update")

    title = _clean(patch["title"]) if "title" in patch else post.title
    content = _clean(patch["content"]) if "content" in patch else post.content
    if "image_url" in patch:
        image_url = _clean(patch["image_url"]) or None
    else:
        image_url = post.image_url

    errors = validate_post_fields(title, content, image_url)
    if errors:
        raise ValidationError(errors)

    post.title = title
    post.content = content
    post.image_url = image_url
    post.updated_at = utcnow()
    db.commit()
    db.refresh(post)
    logger.info("Post updated", extra={"post_id": post.id, "user_id": author_id})
    return post


def delete_post(db: Session, post_id: int, author_id: int) -> None:
    """Remove an owned post. Raises NotFoundError (also on a repeated delete) or ForbiddenError."""
    post = _get_owned_post(db, post_id, author_id, "delete")
    db.delete(post)
    db.commit()
    logger.info("Post deleted", extra={"post_id": post_id, "user_id": author_id})
