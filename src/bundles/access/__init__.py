"""Auth gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeAuthGateway for development and testing
- HttpAuthGateway for the hosted backend (AUTH_ADAPTER=http)
"""

import os

from bundles.access.port import AuthGateway

_current_gateway: AuthGateway | None = None


def get_gateway() -> AuthGateway:
    """Return the current auth gateway, built from AUTH_ADAPTER on first use."""
    global _current_gateway
    if _current_gateway is None:
        adapter = os.environ.get("AUTH_ADAPTER", "fake")
        if adapter == "fake":
            from bundles.access.fake_adapter import FakeAuthGateway

            _current_gateway = FakeAuthGateway()
        elif adapter == "http":
            from bundles.access.http_adapter import HttpAuthGateway

            _current_gateway = HttpAuthGateway(
                base_url=os.environ["STOREFRONT_API_URL"],
                api_key=os.environ["STOREFRONT_API_KEY"],
            )
        else:
            raise ValueError(f"Unknown auth adapter: {adapter}")
    return _current_gateway


def set_gateway(gateway: AuthGateway) -> None:
    """Override the active auth gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
