"""Control-plane HTTP client."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

import httpx
import structlog
from pydantic import ValidationError as ModelValidationError

from vpclink_cli.client.auth import resolve_auth
from vpclink_cli.client.errors import (
    AuthenticationError,
    ConflictError,
    ControlPlaneAPIError,
    ControlPlaneConnectionError,
    ErrorKind,
    NotFoundError,
    ValidationError,
    error_kind,
)
from vpclink_cli.config.constants import DEFAULT_MAX_RETRIES, VPC_LINKS_PATH
from vpclink_cli.config.models import ControlPlaneProfile
from vpclink_cli.models.common import ErrorResponse
from vpclink_cli.models.vpc_link import PatchOperation, RemoteResourceState, ResourceSpec

logger = structlog.get_logger()

# Fallback codes when the response names none.
STATUS_ERROR_CODES: dict[int, str] = {
    400: "BadRequestException",
    401: "UnauthorizedException",
    403: "AccessDeniedException",
    404: "NotFoundException",
    409: "ConflictException",
    429: "TooManyRequestsException",
    503: "ServiceUnavailableException",
}


def _error_code(response: httpx.Response, body: ErrorResponse) -> str | None:
    """Extract the remote error code, e.g. ``NotFoundException``.

    Header values look like ``NotFoundException:http://internal/``; body
    ``__type`` values may be namespaced (``com.amazon...#NotFoundException``).
    """
    raw = response.headers.get("x-amzn-ErrorType") or body.code
    if raw:
        return raw.split(":", 1)[0].rsplit("#", 1)[-1]
    return STATUS_ERROR_CODES.get(response.status_code)


class ControlPlaneClient:
    """Synchronous HTTP client for the VPC link API."""

    def __init__(self, profile: ControlPlaneProfile) -> None:
        self.profile = profile
        self.base_url = profile.url
        auth = resolve_auth(profile)
        if not profile.verify_ssl:
            logger.warning("tls_verification_disabled", url=profile.url)
        transport = httpx.HTTPTransport(retries=DEFAULT_MAX_RETRIES)
        self._client = httpx.Client(
            base_url=self.base_url,
            auth=auth,
            verify=profile.verify_ssl,
            timeout=profile.timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> ControlPlaneClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _handle_response(self, response: httpx.Response) -> httpx.Response:
        if response.is_success:
            return response
        status = response.status_code
        try:
            body = ErrorResponse.model_validate(response.json())
        except (json.JSONDecodeError, UnicodeDecodeError, ModelValidationError):
            body = ErrorResponse()
        detail = body.message or response.text
        code = _error_code(response, body)
        if error_kind(code) is ErrorKind.NOT_FOUND:
            raise NotFoundError(f"Not found: {detail}")
        if status in (401, 403):
            raise AuthenticationError("Authentication failed. Check your API key.")
        if status == 409 or code == "ConflictException":
            raise ConflictError(f"Conflict: {detail}")
        if status in (400, 422) or code == "BadRequestException":
            raise ValidationError(detail)
        raise ControlPlaneAPIError(status, detail, code)

    def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.ConnectError as exc:
            raise ControlPlaneConnectionError(
                f"Cannot connect to control plane at {self.profile.url}: {exc}"
            ) from exc
        except httpx.TimeoutException as exc:
            raise ControlPlaneConnectionError(
                f"Request to {self.profile.url} timed out: {exc}"
            ) from exc
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            raise ControlPlaneConnectionError(
                f"Invalid URL for control plane at {self.profile.url}: {exc}"
            ) from exc
        logger.debug(
            "control_plane_request", method=method, path=path, status=response.status_code,
        )
        return self._handle_response(response)

    def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("POST", path, **kwargs)

    def patch(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("DELETE", path, **kwargs)

    def _parse_state(self, response: httpx.Response) -> RemoteResourceState:
        try:
            return RemoteResourceState.model_validate(response.json())
        except (json.JSONDecodeError, UnicodeDecodeError, ModelValidationError) as exc:
            raise ControlPlaneAPIError(
                response.status_code, f"Malformed VPC link response: {exc}",
            ) from exc

    # VPC link operations

    def create_vpc_link(self, spec: ResourceSpec) -> RemoteResourceState:
        payload: dict[str, Any] = {
            "name": spec.name,
            "targetArns": sorted(spec.targets),
        }
        if spec.description:
            payload["description"] = spec.description
        return self._parse_state(self.post(VPC_LINKS_PATH, json=payload))

    def get_vpc_link(self, resource_id: str) -> RemoteResourceState:
        return self._parse_state(self.get(f"{VPC_LINKS_PATH}/{resource_id}"))

    def update_vpc_link(
        self, resource_id: str, patches: Sequence[PatchOperation],
    ) -> RemoteResourceState:
        payload = {"patchOperations": [p.to_api() for p in patches]}
        return self._parse_state(self.patch(f"{VPC_LINKS_PATH}/{resource_id}", json=payload))

    def delete_vpc_link(self, resource_id: str) -> None:
        self.delete(f"{VPC_LINKS_PATH}/{resource_id}")
