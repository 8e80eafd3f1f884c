"""Bearer credential handling for package endpoints."""

import re

from bundles.access import get_gateway
from bundles.access.port import ANONYMOUS, AuthGateway, AuthGatewayError, Principal
from bundles.domain import logger
from bundles.errors import Forbidden, Unauthenticated

_BEARER_PREFIX = re.compile(r"^Bearer\s+", re.IGNORECASE)


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization`` header value."""
    if not authorization:
        return None
    token = _BEARER_PREFIX.sub("", authorization.strip(), count=1).strip()
    return token or None


def resolve_principal(authorization: str | None, gateway: AuthGateway | None = None) -> Principal:
    """Resolve the caller. Missing, invalid or unverifiable credentials yield ANONYMOUS."""
    token = bearer_token(authorization)
    if token is None:
        return ANONYMOUS

    gateway = gateway or get_gateway()
    try:
        user_id = gateway.resolve_user(token)
    except AuthGatewayError as exc:
        logger.warning("credential_resolution_failed", error=str(exc))
        return ANONYMOUS

    if not user_id:
        return ANONYMOUS

    try:
        role = gateway.role_for(user_id)
    except AuthGatewayError as exc:
        logger.warning("role_lookup_failed", user_id=user_id, error=str(exc))
        role = None

    return Principal(user_id=str(user_id), role=role)


def require_admin(authorization: str | None, gateway: AuthGateway | None = None) -> Principal:
    principal = resolve_principal(authorization, gateway)
    if not principal.is_authenticated:
        raise Unauthenticated()
    if not principal.is_admin:
        raise Forbidden()
    return principal
