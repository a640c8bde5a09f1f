"""Request/response schemas for post endpoints. JSON keys are camelCase to match the web client."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class PostCreateRequest(BaseModel):
    """Body for POST /posts. Missing fields are reported by the post store's validation."""

    title: str | None = None
    content: str | None = None
    image_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("imageURL", "image_url"),
        description="Optional http(s) URL ending in .jpg, .jpeg, .png, .webp or .gif",
    )


class PostUpdateRequest(BaseModel):
    """Body for PUT /posts/{id}. Only fields present in the body are applied."""

    title: str | None = None
    content: str | None = None
    image_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("imageURL", "image_url"),
    )


class PostOut(BaseModel):
    """A persisted post as returned to clients."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    title: str
    image_url: str | None = Field(default=None, alias="imageURL")
    content: str
    username: str
    user_id: int = Field(alias="userId")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class PostResponse(BaseModel):
    """Single post envelope for GET /posts/{id}."""

    post: PostOut


class PostMutationResponse(BaseModel):
    """Envelope for create and update: a message plus the resulting post."""

    message: str
    post: PostOut


class MessageResponse(BaseModel):
    """Plain acknowledgement envelope, e.g. for DELETE /posts/{id}."""

    message: str


class PostsResponse(BaseModel):
    """Paginated list envelope shared by GET /posts and GET /posts/user/me."""

    model_config = ConfigDict(populate_by_name=True)

    posts: list[PostOut]
    total_pages: int = Field(alias="totalPages")
    current_page: int = Field(alias="currentPage")
    total: int

    @classmethod
    def empty(cls) -> "PostsResponse":
        """Shape returned when a listing fails internally."""
        return cls(posts=[], total_pages=0, current_page=1, total=0)
