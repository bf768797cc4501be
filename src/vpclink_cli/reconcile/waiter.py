"""Bounded status polling for asynchronously provisioned resources."""

from __future__ import annotations

import time
from collections.abc import Callable, Collection
from typing import TypeVar

import structlog

from vpclink_cli.client.errors import StateTimeoutError, UnexpectedStatusError

logger = structlog.get_logger()

T = TypeVar("T")


def wait_for_state(
    refresh: Callable[[], tuple[T, str]],
    *,
    pending: Collection[str],
    target: Collection[str],
    timeout: float,
    delay: float = 0.0,
    min_interval: float = 3.0,
    operation: str | None = None,
    resource_id: str | None = None,
    sleep: Callable[[float], None] | None = None,
    clock: Callable[[], float] | None = None,
) -> T:
    """Poll *refresh* until its status lands in *target*.

    Sleeps *delay* once, then calls *refresh* every *min_interval* seconds
    while the status stays in *pending*. A status outside both sets raises
    :class:`UnexpectedStatusError` immediately; staying pending past
    *timeout* (measured from the call, delay included) raises
    :class:`StateTimeoutError`. Exceptions from *refresh* propagate
    unchanged.
    """
    sleep = sleep or time.sleep
    clock = clock or time.monotonic
    log = logger.bind(operation=operation, resource_id=resource_id)

    start = clock()
    if delay > 0:
        sleep(delay)

    attempt = 0
    while True:
        attempt += 1
        value, status = refresh()
        elapsed = clock() - start
        log.debug("wait_poll", attempt=attempt, status=status, elapsed=round(elapsed, 3))

        if status in target:
            log.info("wait_complete", status=status, attempts=attempt, elapsed=round(elapsed, 3))
            return value
        if status not in pending:
            raise UnexpectedStatusError(
                status, target, operation=operation, resource_id=resource_id,
            )
        if elapsed >= timeout:
            raise StateTimeoutError(
                elapsed, timeout, status, target,
                operation=operation, resource_id=resource_id,
            )
        sleep(min_interval)
