from typing import Any

import httpx
from aws_lambda_powertools import Logger
from fastapi import status
from httpx import HTTPError

from blog.middlewares import X_CORRELATION_ID, correlation_id


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    @property
    def is_not_found(self) -> bool:
        return self.status_code == status.HTTP_404_NOT_FOUND


class PostsApiClient:
    """Thin async wrapper around the posts REST API used by the page routes."""

    ERROR_API_UNAVAILABLE = "The blog API is unavailable. Please try again."

    def __init__(self, base_url: str, timeout: float = 5.0):
        self._logger = Logger(utc=True)
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def aclose(self):
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        headers = {X_CORRELATION_ID: correlation_id.get("")}
        try:
            response = await self._client.request(
                method, url, headers={k: v for k, v in headers.items() if v}, **kwargs
            )
        except HTTPError as exc:
            self._logger.exception(f"Blog API request failed {method=} {url=}")
            raise ApiError(
                status.HTTP_503_SERVICE_UNAVAILABLE, self.ERROR_API_UNAVAILABLE
            ) from exc
        if response.is_error:
            try:
                message = response.json().get("message") or response.reason_phrase
            except ValueError:
                message = response.reason_phrase
            self._logger.warning(
                f"Blog API returned an error {method=} {url=} {response.status_code=}"
            )
            raise ApiError(response.status_code, message)
        return response

    async def list_posts(
        self, page: int = 1, per_page: int = 10, post_status: str | None = None
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"page": page, "per_page": per_page}
        if post_status:
            params["status"] = post_status
        response = await self._request("GET", "/api/posts", params=params)
        return response.json()

    async def get_post(self, post_id: int, count_view: bool = True) -> dict[str, Any]:
        params = {} if count_view else {"count_view": "false"}
        response = await self._request("GET", f"/api/posts/{post_id}", params=params)
        return response.json()

    async def create_post(self, data: dict[str, Any]) -> dict[str, Any]:
        return (await self._request("POST", "/api/posts", json=data)).json()

    async def update_post(self, post_id: int, data: dict[str, Any]) -> dict[str, Any]:
        return (await self._request("PUT", f"/api/posts/{post_id}", json=data)).json()

    async def delete_post(self, post_id: int):
        await self._request("DELETE", f"/api/posts/{post_id}")
