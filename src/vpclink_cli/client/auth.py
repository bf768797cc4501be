"""Authentication for the control-plane API."""

from __future__ import annotations

from collections.abc import Generator

import httpx

from vpclink_cli.config.models import ControlPlaneProfile


class APIKeyAuth(httpx.Auth):
    """Authenticate using an API key (x-api-key header)."""

    def __init__(self, token: str) -> None:
        self.token = token

    def auth_flow(
        self, request: httpx.Request,
    ) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["x-api-key"] = self.token
        yield request


def resolve_auth(profile: ControlPlaneProfile) -> httpx.Auth | None:
    """Resolve authentication from a control-plane profile."""
    if profile.token:
        return APIKeyAuth(profile.token)
    return None
