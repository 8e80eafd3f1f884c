"""Async HTTP client for the storefront backend (catalogue rows and packages)."""

from typing import Any

import httpx

from storefront.config import StorefrontSettings


class StorefrontClientError(Exception):
    """A backend call failed. ``status`` is None for transport failures."""

    def __init__(self, code: str, status: int | None = None) -> None:
        self.code = code
        self.status = status
        super().__init__(f"{status or 'transport'}: {code}")


def _package(body: dict[str, Any]) -> dict[str, Any]:
    package = body.get("package")
    if not isinstance(package, dict):
        raise StorefrontClientError("unexpected response body")
    return package


class StorefrontClient:
    def __init__(
        self,
        settings: StorefrontSettings,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.token = token
        self.http = httpx.AsyncClient(
            base_url=settings.api_url,
            timeout=settings.timeout,
            transport=transport,
        )

    def _headers(self) -> dict[str, str]:
        headers = {}
        if self.settings.api_key:
            headers["apikey"] = self.settings.api_key
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _request(self, method: str, path: str, json: Any = None) -> dict[str, Any]:
        try:
            response = await self.http.request(method, path, json=json, headers=self._headers())
        except httpx.HTTPError as exc:
            raise StorefrontClientError(str(exc) or exc.__class__.__name__) from exc

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_error:
            code = body.get("error") if isinstance(body, dict) else None
            raise StorefrontClientError(code or response.reason_phrase, status=response.status_code)
        if not isinstance(body, dict):
            raise StorefrontClientError("unexpected response body", status=response.status_code)
        return body

    async def fetch_catalogue_rows(self) -> dict[str, Any]:
        return await self._request("GET", "/catalogue/rows")

    async def fetch_packages(self) -> dict[str, Any]:
        return await self._request("GET", "/packages")

    async def replace_package(self, name: str, skus: list[str]) -> dict[str, Any]:
        body = await self._request("PUT", "/packages", json={"name": name, "skus": skus})
        return _package(body)

    async def merge_package(
        self,
        name: str,
        add_skus: list[str] | None = None,
        remove_skus: list[str] | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": name}
        if add_skus is not None:
            payload["addSkus"] = add_skus
        if remove_skus is not None:
            payload["removeSkus"] = remove_skus
        body = await self._request("PATCH", "/packages", json=payload)
        return _package(body)

    async def aclose(self) -> None:
        await self.http.aclose()
