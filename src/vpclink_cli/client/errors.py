"""Typed exceptions, error-code mapping and error handling decorator."""

from __future__ import annotations

import enum
import functools
from collections.abc import Iterable
from typing import Any, Callable, TypeVar

from rich.console import Console

F = TypeVar("F", bound=Callable[..., Any])

err_console = Console(stderr=True)


class ErrorKind(enum.Enum):
    """Closed set of error kinds the controller branches on."""

    NOT_FOUND = "not_found"
    TRANSPORT = "transport"


# Remote error code -> kind. Anything not listed is a transport error.
ERROR_CODE_KINDS: dict[str, ErrorKind] = {
    "NotFoundException": ErrorKind.NOT_FOUND,
    "BadRequestException": ErrorKind.TRANSPORT,
    "ConflictException": ErrorKind.TRANSPORT,
    "UnauthorizedException": ErrorKind.TRANSPORT,
    "AccessDeniedException": ErrorKind.TRANSPORT,
    "TooManyRequestsException": ErrorKind.TRANSPORT,
    "LimitExceededException": ErrorKind.TRANSPORT,
    "ServiceUnavailableException": ErrorKind.TRANSPORT,
}


def error_kind(code: str | None) -> ErrorKind:
    """Map a remote error code to its kind."""
    if code is None:
        return ErrorKind.TRANSPORT
    return ERROR_CODE_KINDS.get(code, ErrorKind.TRANSPORT)


class VpcLinkCLIError(Exception):
    """Base exception for vpclink-cli."""

    exit_code: int = 1
    kind: ErrorKind = ErrorKind.TRANSPORT


class ControlPlaneConnectionError(VpcLinkCLIError):
    """Cannot connect to the control plane."""

    exit_code = 2


class AuthenticationError(VpcLinkCLIError):
    """Authentication failed (401/403)."""

    exit_code = 3


class NotFoundError(VpcLinkCLIError):
    """Resource not found (404 / NotFoundException)."""

    exit_code = 4
    kind = ErrorKind.NOT_FOUND


class ConflictError(VpcLinkCLIError):
    """Resource conflict (409)."""

    exit_code = 5


class ConfigurationError(VpcLinkCLIError):
    """Missing or invalid CLI configuration."""

    exit_code = 6


class ValidationError(VpcLinkCLIError):
    """Request rejected by the control plane as invalid (400/422)."""

    exit_code = 7

    def __init__(self, detail: str = "") -> None:
        super().__init__(f"Validation error: {detail}" if detail else "Validation error")


class ControlPlaneAPIError(VpcLinkCLIError):
    """Generic API error from the control plane."""

    def __init__(self, status_code: int, detail: str = "", code: str | None = None) -> None:
        self.status_code = status_code
        self.code = code
        prefix = f"Control plane returned {status_code}"
        if code:
            prefix += f" ({code})"
        super().__init__(f"{prefix}: {detail}")


class ControllerStateError(VpcLinkCLIError):
    """Operation is not valid for the controller's current binding."""

    exit_code = 10


class WaitError(VpcLinkCLIError):
    """Base for failures of the bounded status wait."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        resource_id: str | None = None,
    ) -> None:
        self.operation = operation
        self.resource_id = resource_id
        context = []
        if operation:
            context.append(operation)
        if resource_id:
            context.append(f"VPC link {resource_id}")
        if context:
            message = f"{' of '.join(context)}: {message}"
        super().__init__(message)


class UnexpectedStatusError(WaitError):
    """The remote side reported a status outside the pending and target sets."""

    exit_code = 8

    def __init__(
        self,
        status: str,
        target: Iterable[str],
        *,
        operation: str | None = None,
        resource_id: str | None = None,
    ) -> None:
        self.status = status
        self.target = frozenset(target)
        expected = ", ".join(sorted(self.target))
        super().__init__(
            f"unexpected status {status!r} while waiting for {expected}",
            operation=operation,
            resource_id=resource_id,
        )


class StateTimeoutError(WaitError):
    """Target status not reached within the configured timeout."""

    exit_code = 9

    def __init__(
        self,
        elapsed: float,
        timeout: float,
        last_status: str | None,
        target: Iterable[str],
        *,
        operation: str | None = None,
        resource_id: str | None = None,
    ) -> None:
        self.elapsed = elapsed
        self.timeout = timeout
        self.last_status = last_status
        self.target = frozenset(target)
        expected = ", ".join(sorted(self.target))
        super().__init__(
            f"timed out after {elapsed:.1f}s (limit {timeout:.0f}s) waiting for "
            f"{expected}; last status {last_status!r}",
            operation=operation,
            resource_id=resource_id,
        )


def error_handler(func: F) -> F:
    """Decorator that catches VpcLinkCLIError and prints user-friendly messages."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except VpcLinkCLIError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}")
            raise SystemExit(exc.exit_code)
        except ValueError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}")
            raise SystemExit(1)

    return wrapper  # type: ignore[return-value]
