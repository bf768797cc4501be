"""VPC link controller — create/read/update/delete with convergence waits.

A controller is bound to at most one remote VPC link id. "Not found" from
the control plane is treated as the link being gone: reads, updates and
deletes clear the binding and succeed, so a caller can re-run any operation
after a partial failure or out-of-band change.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Sequence
from typing import Protocol

import structlog

from vpclink_cli.client.errors import (
    ControllerStateError,
    NotFoundError,
    UnexpectedStatusError,
    VpcLinkCLIError,
)
from vpclink_cli.config.models import WaitSettings
from vpclink_cli.models.vpc_link import (
    STATUS_AVAILABLE,
    STATUS_DELETING,
    STATUS_PENDING,
    PatchOperation,
    RemoteResourceState,
    ResourceSpec,
)
from vpclink_cli.reconcile.diff import compute_patches
from vpclink_cli.reconcile.waiter import wait_for_state

logger = structlog.get_logger()

PENDING_STATUSES = frozenset({STATUS_PENDING})
TARGET_STATUSES = frozenset({STATUS_AVAILABLE})


class ControlPlane(Protocol):
    """What the controller needs from a control-plane client."""

    def create_vpc_link(self, spec: ResourceSpec) -> RemoteResourceState: ...

    def get_vpc_link(self, resource_id: str) -> RemoteResourceState: ...

    def update_vpc_link(
        self, resource_id: str, patches: Sequence[PatchOperation],
    ) -> RemoteResourceState: ...

    def delete_vpc_link(self, resource_id: str) -> None: ...


class LinkState(enum.Enum):
    ABSENT = "absent"
    PROVISIONING = "provisioning"
    AVAILABLE = "available"
    DELETING = "deleting"
    FAILED = "failed"


def state_for_status(status: str) -> LinkState:
    if status == STATUS_AVAILABLE:
        return LinkState.AVAILABLE
    if status == STATUS_PENDING:
        return LinkState.PROVISIONING
    if status == STATUS_DELETING:
        return LinkState.DELETING
    return LinkState.FAILED


class VpcLinkController:
    """Drives one VPC link toward its declared state."""

    def __init__(
        self,
        client: ControlPlane,
        resource_id: str | None = None,
        *,
        wait: WaitSettings | None = None,
        sleep: Callable[[float], None] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.client = client
        self.wait_settings = wait or WaitSettings()
        self._sleep = sleep
        self._clock = clock
        self._resource_id = resource_id
        self._state = LinkState.AVAILABLE if resource_id else LinkState.ABSENT
        self.observed: RemoteResourceState | None = None

    @property
    def resource_id(self) -> str | None:
        return self._resource_id

    @property
    def state(self) -> LinkState:
        return self._state

    def _log(self, operation: str) -> structlog.stdlib.BoundLogger:
        return logger.bind(operation=operation, resource_id=self._resource_id)

    def _forget(self, operation: str) -> None:
        self._log(operation).info("vpc_link_vanished")
        self._resource_id = None
        self._state = LinkState.ABSENT
        self.observed = None

    def _refresh(self) -> tuple[RemoteResourceState, str]:
        if self._resource_id is None:
            raise ControllerStateError("Cannot refresh: controller is not bound to a VPC link")
        state = self.client.get_vpc_link(self._resource_id)
        self.observed = state
        return state, state.status

    def _wait_available(self, operation: str) -> RemoteResourceState:
        self._state = LinkState.PROVISIONING
        settings = self.wait_settings
        try:
            result = wait_for_state(
                self._refresh,
                pending=PENDING_STATUSES,
                target=TARGET_STATUSES,
                timeout=settings.timeout,
                delay=settings.delay,
                min_interval=settings.min_interval,
                operation=operation,
                resource_id=self._resource_id,
                sleep=self._sleep,
                clock=self._clock,
            )
        except UnexpectedStatusError as exc:
            self._state = LinkState.FAILED
            self._log(operation).error("vpc_link_wait_failed", status=exc.status, err=str(exc))
            raise
        except VpcLinkCLIError as exc:
            self._log(operation).error("vpc_link_wait_failed", err=str(exc))
            raise
        self._state = LinkState.AVAILABLE
        return result

    def create(self, spec: ResourceSpec) -> RemoteResourceState:
        """Create the link and wait until it is available.

        The id is bound as soon as the create call returns. If the wait then
        fails the id stays bound: the remote link may exist and need deleting.
        """
        if self._resource_id is not None:
            raise ControllerStateError(
                f"Controller is already bound to VPC link {self._resource_id}"
            )
        try:
            created = self.client.create_vpc_link(spec)
        except VpcLinkCLIError as exc:
            self._log("create").error("vpc_link_create_failed", name=spec.name, err=str(exc))
            raise
        self._resource_id = created.id
        self.observed = created
        self._log("create").info("vpc_link_created", name=spec.name, status=created.status)
        return self._wait_available("create")

    def read(self) -> RemoteResourceState | None:
        """Refresh the observed state. Returns ``None`` once the link is gone."""
        if self._resource_id is None:
            return None
        try:
            state = self.client.get_vpc_link(self._resource_id)
        except NotFoundError:
            self._forget("read")
            return None
        except VpcLinkCLIError as exc:
            self._log("read").error("vpc_link_read_failed", err=str(exc))
            raise
        self.observed = state
        self._state = state_for_status(state.status)
        return state

    def update(
        self, previous: ResourceSpec, desired: ResourceSpec,
    ) -> RemoteResourceState | None:
        """Patch the link from *previous* to *desired* and wait for it.

        Returns ``None`` if the link vanished. When nothing changed no patch
        is sent; the last observed state is returned, reading it first if
        the link was never read.
        """
        if self._resource_id is None:
            raise ControllerStateError("Cannot update: controller is not bound to a VPC link")
        patches = compute_patches(previous, desired)
        if not patches:
            self._log("update").debug("vpc_link_unchanged")
            if self.observed is None:
                return self.read()
            return self.observed
        try:
            self.client.update_vpc_link(self._resource_id, patches)
        except NotFoundError:
            self._forget("update")
            return None
        except VpcLinkCLIError as exc:
            self._log("update").error("vpc_link_update_failed", err=str(exc))
            raise
        self._log("update").info("vpc_link_patched", operations=len(patches))
        return self._wait_available("update")

    def wait(self) -> RemoteResourceState:
        """Block until the bound link reports available."""
        if self._resource_id is None:
            raise ControllerStateError("Cannot wait: controller is not bound to a VPC link")
        return self._wait_available("wait")

    def delete(self) -> None:
        """Delete the link. Deleting a link that is already gone succeeds."""
        if self._resource_id is None:
            return
        previous_state = self._state
        self._state = LinkState.DELETING
        try:
            self.client.delete_vpc_link(self._resource_id)
        except NotFoundError:
            self._forget("delete")
            return
        except VpcLinkCLIError as exc:
            self._state = previous_state
            self._log("delete").error("vpc_link_delete_failed", err=str(exc))
            raise
        self._log("delete").info("vpc_link_deleted")
        self._resource_id = None
        self._state = LinkState.ABSENT
        self.observed = None
