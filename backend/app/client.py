"""
LocalBiz Directory — HTTP Client
==================================

What:  Async client for the directory API, one method per call the browser
       views make (login form, dashboard, business page, admin dashboard).
How:   Wraps an httpx.AsyncClient. register() and login() remember the
       returned token and send it as a bearer header on later calls.
       Any non-2xx answer raises DirectoryClientError carrying the status
       and the server's message.

Example:
    async with DirectoryClient("http://localhost:8000") as client:
        await client.login("ada@directory.io", "pw")
        bakeries = await client.list_businesses(sort_by="name")
"""

from typing import Any, Dict, List, Optional

import httpx


class DirectoryClientError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status: int, message: str, error: Optional[str] = None):
        self.status = status
        self.message = message
        self.error = error
        super().__init__(f"{status}: {message}")


class DirectoryClient:

    def __init__(
        self,
        base_url: str,
        api_prefix: str = "/api",
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        self.api_prefix = api_prefix.rstrip("/")
        self.token = token
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "DirectoryClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def logout(self) -> None:
        self.token = None

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        response = await self._http.request(
            method, f"{self.api_prefix}{path}", json=json, params=params, headers=headers
        )
        if response.is_success:
            return response.json()

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        raise DirectoryClientError(
            response.status_code,
            body.get("message") or response.reason_phrase,
            body.get("error"),
        )

    # ── Users ─────────────────────────────────────────────────────────────

    async def register(self, name: str, email: str, password: str, role: str = "USER") -> dict:
        data = await self._request(
            "POST",
            "/users/register",
            json={"name": name, "email": email, "password": password, "role": role},
        )
        self.token = data["token"]
        return data

    async def login(self, email: str, password: str) -> dict:
        data = await self._request(
            "POST", "/users/login", json={"email": email, "password": password}
        )
        self.token = data["token"]
        return data

    async def profile(self) -> dict:
        return await self._request("GET", "/users/profile")

    # ── Businesses ────────────────────────────────────────────────────────

    async def list_businesses(
        self,
        category_id: Optional[int] = None,
        location: Optional[str] = None,
        sort_by: Optional[str] = None,
        order: Optional[str] = None,
    ) -> List[dict]:
        return await self._request(
            "GET",
            "/businesses",
            params={
                "categoryId": category_id,
                "location": location,
                "sortBy": sort_by,
                "order": order,
            },
        )

    async def get_business(self, business_id: int) -> dict:
        return await self._request("GET", f"/businesses/{business_id}")

    async def my_businesses(self) -> List[dict]:
        return await self._request("GET", "/businesses/admin/my-businesses")

    async def create_business(
        self,
        name: str,
        category: str,
        description: str = "",
        address: str = "",
        location: str = "",
    ) -> dict:
        return await self._request(
            "POST",
            "/businesses",
            json={
                "name": name,
                "description": description,
                "address": address,
                "location": location,
                "category": category,
            },
        )

    async def update_business(self, business_id: int, category: str, **fields: Any) -> dict:
        """fields: any of name, description, address, location."""
        return await self._request(
            "PUT", f"/businesses/{business_id}", json={**fields, "category": category}
        )

    async def delete_business(self, business_id: int) -> dict:
        return await self._request("DELETE", f"/businesses/{business_id}")

    # ── Categories ────────────────────────────────────────────────────────

    async def list_categories(self) -> List[dict]:
        return await self._request("GET", "/categories")

    # ── Reviews ───────────────────────────────────────────────────────────

    async def business_reviews(
        self,
        business_id: int,
        rating: Optional[int] = None,
        sort_by: Optional[str] = None,
        order: Optional[str] = None,
    ) -> List[dict]:
        return await self._request(
            "GET",
            f"/reviews/{business_id}",
            params={"rating": rating, "sortBy": sort_by, "order": order},
        )

    async def all_reviews(self) -> List[dict]:
        return await self._request("GET", "/reviews/all")

    async def create_review(
        self, business_id: int, rating: int, comment: Optional[str] = None
    ) -> dict:
        return await self._request(
            "POST", f"/reviews/{business_id}", json={"rating": rating, "comment": comment}
        )

    async def update_review(
        self,
        review_id: int,
        rating: Optional[int] = None,
        comment: Optional[str] = None,
    ) -> dict:
        body = {k: v for k, v in {"rating": rating, "comment": comment}.items() if v is not None}
        return await self._request("PUT", f"/reviews/{review_id}", json=body)

    async def delete_review(self, review_id: int) -> dict:
        return await self._request("DELETE", f"/reviews/{review_id}")
