"""Errors surfaced by the package membership service.

Each error carries the HTTP status and the short code returned to callers as
``{"error": code}``. Storage failures are reported as ``UpstreamFailure``
without internal detail.
"""


class PackageServiceError(Exception):
    status_code = 500
    code = "upstream failure"

    def __init__(self, code: str | None = None) -> None:
        if code is not None:
            self.code = code
        super().__init__(self.code)


class Unauthenticated(PackageServiceError):
    """No credential, or a credential that does not resolve to a user."""

    status_code = 401
    code = "unauthorized"


class Forbidden(PackageServiceError):
    """Valid credential without the admin role."""

    status_code = 403
    code = "forbidden"


class InvalidPayload(PackageServiceError):
    status_code = 400
    code = "invalid payload"


class NotFound(PackageServiceError):
    status_code = 404
    code = "package not found"


class UpstreamFailure(PackageServiceError):
    status_code = 500
    code = "upstream failure"
