"""Auth gateway backed by a hosted auth + REST backend.

Tokens are checked against ``GET {base}/auth/v1/user``. Roles come from the
``profiles`` table via ``GET {base}/rest/v1/profiles``. Both calls carry the
deployment's public API key. Any reply that is not the expected JSON shape
is reported as ``AuthGatewayError``.
"""

import httpx

from bundles.access.port import AuthGateway, AuthGatewayError


def _json(response: httpx.Response, expected: type):
    try:
        body = response.json()
    except ValueError as exc:
        raise AuthGatewayError(f"Non-JSON reply from {response.url.path}") from exc
    if not isinstance(body, expected):
        raise AuthGatewayError(f"Unexpected reply shape from {response.url.path}")
    return body


class HttpAuthGateway(AuthGateway):
    def __init__(self, base_url: str, api_key: str, timeout: float = 10.0, transport=None) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.client = httpx.Client(timeout=timeout, transport=transport)

    def resolve_user(self, token: str) -> str | None:
        try:
            response = self.client.get(
                f"{self.base_url}/auth/v1/user",
                headers={"apikey": self.api_key, "Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as exc:
            raise AuthGatewayError(str(exc)) from exc

        if response.status_code != 200:
            return None
        user_id = _json(response, dict).get("id")
        return str(user_id) if user_id else None

    def role_for(self, user_id: str) -> str | None:
        try:
            response = self.client.get(
                f"{self.base_url}/rest/v1/profiles",
                params={"id": f"eq.{user_id}", "select": "role"},
                headers={"apikey": self.api_key, "Authorization": f"Bearer {self.api_key}"},
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise AuthGatewayError(str(exc)) from exc

        rows = _json(response, list)
        if not rows:
            return None
        if not isinstance(rows[0], dict):
            raise AuthGatewayError("Unexpected profile row")
        return rows[0].get("role")

    def close(self) -> None:
        self.client.close()
