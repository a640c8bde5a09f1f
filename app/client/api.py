"""HTTP client for the blog API (httpx). Attaches the session's bearer token and clears it on 401."""

from typing import Any

import httpx

from app.client.session import Session
from app.schemas.auth import AuthResponse
from app.schemas.posts import (
    MessageResponse,
    PostMutationResponse,
    PostResponse,
    PostsResponse,
)

DEFAULT_BASE_URL = "http://localhost:5000/api"
DEFAULT_TIMEOUT_SEC = 10.0


class ApiError(Exception):
    """Raised when the API answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class BlogClient:
    """Synchronous API client. Pass transport to route requests somewhere other than the network."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        session: Session | None = None,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.session = session or Session()
        self._http = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "BlogClient":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = kwargs.pop("headers", {})
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        try:
            resp = self._http.request(method, path, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            raise ApiError("Request timeout. Please try again.") from e
        except httpx.TransportError as e:
            raise ApiError("Network error. Please check your connection.") from e

        if resp.status_code == 401:
            self.session.logout()
        if resp.status_code >= 400:
            try:
                message = resp.json().get("message") or "An error occurred"
            except (ValueError, AttributeError):
                message = resp.text[:500] if resp.text else "An error occurred"
            raise ApiError(message, resp.status_code)
        return resp.json()

    def register(self, username: str, email: str, password: str) -> AuthResponse:
        """Create an account and start a session for it."""
        data = self._request(
            "POST",
            "/auth/register",
            json={"username": username, "email": email, "password": password},
        )
        result = AuthResponse.model_validate(data)
        self.session.login(result.token, result.user)
        return result

    def login(self, email: str, password: str) -> AuthResponse:
        data = self._request("POST", "/auth/login", json={"email": email, "password": password})
        result = AuthResponse.model_validate(data)
        self.session.login(result.token, result.user)
        return result

    def logout(self) -> None:
        self.session.logout()

    def list_posts(self, page: int = 1, limit: int = 10, search: str = "") -> PostsResponse:
        data = self._request(
            "GET",
            "/posts",
            params={"page": page, "limit": limit, "search": search.strip()},
        )
        return PostsResponse.model_validate(data)

    def get_post(self, post_id: int | str) -> PostResponse:
        return PostResponse.model_validate(self._request("GET", f"/posts/{post_id}"))

    def create_post(self, title: str, content: str, image_url: str | None = None) -> PostMutationResponse:
        body: dict[str, Any] = {"title": title, "content": content}
        if image_url is not None:
            body["imageURL"] = image_url
        return PostMutationResponse.model_validate(self._request("POST", "/posts", json=body))

    def update_post(self, post_id: int | str, **fields: str | None) -> PostMutationResponse:
        """Send only the given fields (title, content, image_url)."""
        body = {("imageURL" if k == "image_url" else k): v for k, v in fields.items()}
        return PostMutationResponse.model_validate(
            self._request("PUT", f"/posts/{post_id}", json=body)
        )

    def delete_post(self, post_id: int | str) -> MessageResponse:
        return MessageResponse.model_validate(self._request("DELETE", f"/posts/{post_id}"))

    def list_my_posts(self, page: int = 1, limit: int = 10) -> PostsResponse:
        data = self._request("GET", "/posts/user/me", params={"page": page, "limit": limit})
        return PostsResponse.model_validate(data)
