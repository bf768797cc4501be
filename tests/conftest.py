"""Shared test fixtures."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

import pytest
import structlog

from vpclink_cli.client.errors import NotFoundError
from vpclink_cli.config.manager import ConfigManager
from vpclink_cli.config.models import ControlPlaneProfile, WaitSettings
from vpclink_cli.models.vpc_link import (
    STATUS_AVAILABLE,
    STATUS_PENDING,
    PatchOp,
    PatchOperation,
    RemoteResourceState,
    ResourceSpec,
)
from vpclink_cli.reconcile.diff import TARGETS_PREFIX


def pytest_addoption(parser):
    parser.addoption("--api-url", action="store", default=None)
    parser.addoption("--api-token", action="store", default=None)
    parser.addoption("--target-arn", action="store", default=None)


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in list(root.handlers):
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Return a temporary config file path."""
    return tmp_path / "config.toml"


@pytest.fixture
def config_manager(tmp_config: Path) -> ConfigManager:
    """Return a ConfigManager pointed at a temp config file."""
    return ConfigManager(config_path=tmp_config)


@pytest.fixture
def sample_profile() -> ControlPlaneProfile:
    """Return a sample control-plane profile for testing."""
    return ControlPlaneProfile(
        name="test-cp",
        url="https://cp.example.com",
        token="testkey-secret",
    )


@pytest.fixture
def mock_vpc_link() -> dict:
    """Sample GetVpcLink response body."""
    return {
        "id": "vl-1",
        "name": "lb1",
        "description": "front door",
        "targetArns": ["arn:a", "arn:b"],
        "status": "AVAILABLE",
        "statusMessage": "Your vpc link is ready for use",
    }


class FakeClock:
    """Monotonic clock that only moves when ``sleep`` is called."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fast_wait() -> WaitSettings:
    return WaitSettings(timeout=60, delay=10, min_interval=3)


def _apply_patches(
    state: RemoteResourceState, patches: Sequence[PatchOperation],
) -> dict:
    """Field updates produced by applying *patches* to *state*."""
    targets = set(state.targets)
    changes: dict = {}
    for p in patches:
        if p.path.startswith(TARGETS_PREFIX + "/"):
            arn = p.path[len(TARGETS_PREFIX) + 1:].replace("~1", "/").replace("~0", "~")
            if p.op is PatchOp.ADD:
                targets.add(arn)
            elif p.op is PatchOp.REMOVE:
                targets.discard(arn)
        elif p.op is PatchOp.REPLACE:
            changes[p.path.lstrip("/")] = p.value
    changes["targets"] = frozenset(targets)
    return changes


class FakeControlPlane:
    """In-memory control plane.

    Each read pops the next status from a per-link script; once the script
    is exhausted the link stays at its last status.
    """

    def __init__(self, statuses: Iterable[str] = (STATUS_PENDING, STATUS_AVAILABLE)) -> None:
        self.links: dict[str, RemoteResourceState] = {}
        self.scripts: dict[str, list[str]] = {}
        self.default_statuses = list(statuses)
        self.calls: list[tuple[str, ...]] = []
        self.updates: list[tuple[str, list[PatchOperation]]] = []
        self.errors: dict[str, Exception] = {}
        self._next_id = 1

    def _fail(self, operation: str) -> None:
        if operation in self.errors:
            raise self.errors[operation]

    def script(self, resource_id: str, statuses: Iterable[str]) -> None:
        self.scripts[resource_id] = list(statuses)

    def create_vpc_link(self, spec: ResourceSpec) -> RemoteResourceState:
        self.calls.append(("create", spec.name))
        self._fail("create")
        resource_id = f"vl-{self._next_id}"
        self._next_id += 1
        state = RemoteResourceState(
            id=resource_id,
            status=STATUS_PENDING,
            name=spec.name,
            description=spec.description,
            targets=spec.targets,
        )
        self.links[resource_id] = state
        self.scripts[resource_id] = list(self.default_statuses)
        return state

    def get_vpc_link(self, resource_id: str) -> RemoteResourceState:
        self.calls.append(("get", resource_id))
        self._fail("get")
        if resource_id not in self.links:
            raise NotFoundError(f"Not found: Invalid VPC link identifier specified {resource_id}")
        script = self.scripts.get(resource_id, [])
        status = script.pop(0) if len(script) > 1 else (script[0] if script else self.links[resource_id].status)
        state = self.links[resource_id].model_copy(update={"status": status})
        self.links[resource_id] = state
        return state

    def update_vpc_link(
        self, resource_id: str, patches: Sequence[PatchOperation],
    ) -> RemoteResourceState:
        self.calls.append(("update", resource_id))
        self._fail("update")
        if resource_id not in self.links:
            raise NotFoundError(f"Not found: Invalid VPC link identifier specified {resource_id}")
        self.updates.append((resource_id, list(patches)))
        self.scripts[resource_id] = list(self.default_statuses)
        changes = _apply_patches(self.links[resource_id], patches)
        state = self.links[resource_id].model_copy(update={**changes, "status": STATUS_PENDING})
        self.links[resource_id] = state
        return state

    def delete_vpc_link(self, resource_id: str) -> None:
        self.calls.append(("delete", resource_id))
        self._fail("delete")
        if resource_id not in self.links:
            raise NotFoundError(f"Not found: Invalid VPC link identifier specified {resource_id}")
        del self.links[resource_id]

    def count(self, operation: str) -> int:
        return sum(1 for call in self.calls if call[0] == operation)


@pytest.fixture
def control_plane() -> FakeControlPlane:
    return FakeControlPlane()


@pytest.fixture
def make_control_plane():
    """Factory for a fake control plane with a custom status script."""
    return FakeControlPlane


@pytest.fixture
def make_link():
    """Factory for an available remote link with optional overrides."""

    def _make(**overrides) -> RemoteResourceState:
        data = {
            "id": "vl-1",
            "status": STATUS_AVAILABLE,
            "name": "lb1",
            "targets": frozenset({"arn:a", "arn:b"}),
        }
        data.update(overrides)
        return RemoteResourceState(**data)

    return _make
