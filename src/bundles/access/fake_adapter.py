"""In-memory auth gateway for development and testing."""

from bundles.access.port import AuthGateway, AuthGatewayError


class FakeAuthGateway(AuthGateway):
    """Token and role tables held in memory."""

    def __init__(self) -> None:
        self.tokens: dict[str, str] = {}
        self.roles: dict[str, str] = {}
        self.available: bool = True
        self.calls: list[dict] = []

    def register(self, token: str, user_id: str, role: str | None = None) -> None:
        self.tokens[token] = user_id
        if role is not None:
            self.roles[user_id] = role

    def configure(self, available: bool) -> None:
        """Simulate the identity backend going down (or coming back)."""
        self.available = available

    def resolve_user(self, token: str) -> str | None:
        self.calls.append({"method": "resolve_user", "token": token})
        if not self.available:
            raise AuthGatewayError("Identity backend unavailable")
        return self.tokens.get(token)

    def role_for(self, user_id: str) -> str | None:
        self.calls.append({"method": "role_for", "user_id": user_id})
        if not self.available:
            raise AuthGatewayError("Identity backend unavailable")
        return self.roles.get(user_id)
