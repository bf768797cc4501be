"""Integration tests for link commands."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest
import respx
from typer.testing import CliRunner

from vpclink_cli.app import app
from vpclink_cli.config.manager import ConfigManager
from vpclink_cli.config.models import WaitSettings

runner = CliRunner()
BASE = "https://cp.example.com"
COMMON_OPTS = ["--url", BASE, "--token", "k-s"]


def _link(status: str = "AVAILABLE", **overrides) -> dict:
    data = {
        "id": "vl-1",
        "name": "lb1",
        "description": "front door",
        "targetArns": ["arn:a", "arn:b"],
        "status": status,
    }
    data.update(overrides)
    return data


@pytest.fixture(autouse=True)
def fast_manager(tmp_path: Path):
    """Point commands at a temp config whose waits finish quickly."""
    mgr = ConfigManager(config_path=tmp_path / "config.toml")
    mgr.config.wait = WaitSettings(timeout=0.05, delay=0, min_interval=0.01)
    with patch("vpclink_cli.commands._common._get_manager", return_value=mgr):
        yield mgr


class TestCreate:
    @respx.mock
    def test_create_waits_until_available(self):
        create_route = respx.post(f"{BASE}/vpclinks").mock(
            return_value=httpx.Response(202, json=_link("PENDING"))
        )
        get_route = respx.get(f"{BASE}/vpclinks/vl-1").mock(side_effect=[
            httpx.Response(200, json=_link("PENDING")),
            httpx.Response(200, json=_link("AVAILABLE")),
        ])
        result = runner.invoke(app, [
            "link", "create", "--name", "lb1", "--target", "arn:b", "--target", "arn:a",
            "--description", "front door", *COMMON_OPTS,
        ])
        assert result.exit_code == 0, result.output
        assert "created with id vl-1" in result.output
        assert get_route.call_count == 2
        body = json.loads(create_route.calls.last.request.content)
        assert body["targetArns"] == ["arn:a", "arn:b"]

    @respx.mock
    def test_create_json(self):
        respx.post(f"{BASE}/vpclinks").mock(
            return_value=httpx.Response(202, json=_link("PENDING"))
        )
        respx.get(f"{BASE}/vpclinks/vl-1").mock(
            return_value=httpx.Response(200, json=_link("AVAILABLE"))
        )
        result = runner.invoke(app, [
            "link", "create", "--name", "lb1", "-t", "arn:a", "--format", "json", *COMMON_OPTS,
        ])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["id"] == "vl-1"
        assert data["status"] == "AVAILABLE"

    @respx.mock
    def test_create_failed_status(self):
        respx.post(f"{BASE}/vpclinks").mock(
            return_value=httpx.Response(202, json=_link("PENDING"))
        )
        respx.get(f"{BASE}/vpclinks/vl-1").mock(
            return_value=httpx.Response(200, json=_link("FAILED", statusMessage="NLB not found"))
        )
        result = runner.invoke(app, ["link", "create", "--name", "lb1", "-t", "arn:a", *COMMON_OPTS])
        assert result.exit_code == 8
        assert "vl-1" in result.output
        assert "FAILED" in result.output

    @respx.mock
    def test_create_rejected(self):
        respx.post(f"{BASE}/vpclinks").mock(
            return_value=httpx.Response(400, json={"message": "Invalid ARN"})
        )
        result = runner.invoke(app, ["link", "create", "--name", "lb1", "-t", "bogus", *COMMON_OPTS])
        assert result.exit_code == 7
        assert "Invalid ARN" in result.output

    def test_create_requires_target(self):
        result = runner.invoke(app, ["link", "create", "--name", "lb1", *COMMON_OPTS])
        assert result.exit_code != 0


class TestShow:
    @respx.mock
    def test_show(self):
        respx.get(f"{BASE}/vpclinks/vl-1").mock(
            return_value=httpx.Response(200, json=_link())
        )
        result = runner.invoke(app, ["link", "show", "vl-1", *COMMON_OPTS])
        assert result.exit_code == 0
        assert "lb1" in result.output
        assert "AVAILABLE" in result.output

    @respx.mock
    def test_show_missing_is_reported(self):
        respx.get(f"{BASE}/vpclinks/vl-x").mock(
            return_value=httpx.Response(404, json={"message": "Invalid VPC link identifier"})
        )
        result = runner.invoke(app, ["link", "show", "vl-x", *COMMON_OPTS])
        assert result.exit_code == 0
        assert "no longer exists" in result.output

    @respx.mock
    def test_show_yaml(self):
        respx.get(f"{BASE}/vpclinks/vl-1").mock(
            return_value=httpx.Response(200, json=_link())
        )
        result = runner.invoke(app, ["link", "show", "vl-1", "-f", "yaml", *COMMON_OPTS])
        assert result.exit_code == 0
        assert "id: vl-1" in result.output


class TestPlan:
    @respx.mock
    def test_plan_lists_patches(self):
        respx.get(f"{BASE}/vpclinks/vl-1").mock(
            return_value=httpx.Response(200, json=_link())
        )
        result = runner.invoke(app, [
            "link", "plan", "vl-1", "--description", "",
            "--add-target", "arn:c", "--remove-target", "arn:a", "-f", "json", *COMMON_OPTS,
        ])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == [
            {"op": "replace", "path": "/description", "value": ""},
            {"op": "remove", "path": "/targetArns/arn:a"},
            {"op": "add", "path": "/targetArns/arn:c", "value": "arn:c"},
        ]

    @respx.mock
    def test_plan_no_changes(self):
        respx.get(f"{BASE}/vpclinks/vl-1").mock(
            return_value=httpx.Response(200, json=_link())
        )
        result = runner.invoke(app, ["link", "plan", "vl-1", "--name", "lb1", *COMMON_OPTS])
        assert result.exit_code == 0
        assert "No changes" in result.output

    @respx.mock
    def test_plan_does_not_patch(self):
        respx.get(f"{BASE}/vpclinks/vl-1").mock(
            return_value=httpx.Response(200, json=_link())
        )
        patch_route = respx.patch(f"{BASE}/vpclinks/vl-1")
        result = runner.invoke(app, ["link", "plan", "vl-1", "--name", "lb2", *COMMON_OPTS])
        assert result.exit_code == 0
        assert "/name" in result.output
        assert not patch_route.called


class TestUpdate:
    @respx.mock
    def test_update_patches_and_waits(self):
        respx.get(f"{BASE}/vpclinks/vl-1").mock(side_effect=[
            httpx.Response(200, json=_link()),
            httpx.Response(200, json=_link("PENDING", name="lb2")),
            httpx.Response(200, json=_link("AVAILABLE", name="lb2")),
        ])
        patch_route = respx.patch(f"{BASE}/vpclinks/vl-1").mock(
            return_value=httpx.Response(200, json=_link("PENDING", name="lb2"))
        )
        result = runner.invoke(app, ["link", "update", "vl-1", "--name", "lb2", *COMMON_OPTS])
        assert result.exit_code == 0, result.output
        assert "updated" in result.output
        body = json.loads(patch_route.calls.last.request.content)
        assert body == {"patchOperations": [{"op": "replace", "path": "/name", "value": "lb2"}]}

    @respx.mock
    def test_update_no_changes_skips_patch(self):
        respx.get(f"{BASE}/vpclinks/vl-1").mock(
            return_value=httpx.Response(200, json=_link())
        )
        patch_route = respx.patch(f"{BASE}/vpclinks/vl-1")
        result = runner.invoke(app, ["link", "update", "vl-1", "-t", "arn:b", "-t", "arn:a", *COMMON_OPTS])
        assert result.exit_code == 0
        assert "No changes" in result.output
        assert not patch_route.called

    @respx.mock
    def test_update_missing_link(self):
        respx.get(f"{BASE}/vpclinks/vl-x").mock(
            return_value=httpx.Response(404, json={"message": "gone"})
        )
        result = runner.invoke(app, ["link", "update", "vl-x", "--name", "lb2", *COMMON_OPTS])
        assert result.exit_code == 0
        assert "no longer exists" in result.output

    @respx.mock
    def test_update_conflict(self):
        respx.get(f"{BASE}/vpclinks/vl-1").mock(
            return_value=httpx.Response(200, json=_link())
        )
        respx.patch(f"{BASE}/vpclinks/vl-1").mock(
            return_value=httpx.Response(409, json={"message": "link is being modified"})
        )
        result = runner.invoke(app, ["link", "update", "vl-1", "--name", "lb2", *COMMON_OPTS])
        assert result.exit_code == 5


class TestWait:
    @respx.mock
    def test_wait_available(self):
        respx.get(f"{BASE}/vpclinks/vl-1").mock(
            return_value=httpx.Response(200, json=_link())
        )
        result = runner.invoke(app, ["link", "wait", "vl-1", *COMMON_OPTS])
        assert result.exit_code == 0
        assert "AVAILABLE" in result.output

    @respx.mock
    def test_wait_times_out(self):
        respx.get(f"{BASE}/vpclinks/vl-1").mock(
            return_value=httpx.Response(200, json=_link("PENDING"))
        )
        result = runner.invoke(app, ["link", "wait", "vl-1", *COMMON_OPTS])
        assert result.exit_code == 9
        assert "timed out" in result.output


class TestDelete:
    @respx.mock
    def test_delete(self):
        route = respx.delete(f"{BASE}/vpclinks/vl-1").mock(
            return_value=httpx.Response(202)
        )
        result = runner.invoke(app, ["link", "delete", "vl-1", "--force", *COMMON_OPTS])
        assert result.exit_code == 0
        assert "deleted" in result.output
        assert route.called

    @respx.mock
    def test_delete_missing_succeeds(self):
        respx.delete(f"{BASE}/vpclinks/vl-x").mock(
            return_value=httpx.Response(404, json={"message": "gone"})
        )
        result = runner.invoke(app, ["link", "delete", "vl-x", "--force", *COMMON_OPTS])
        assert result.exit_code == 0
        assert "deleted" in result.output

    def test_delete_cancelled(self):
        result = runner.invoke(app, ["link", "delete", "vl-1", *COMMON_OPTS], input="n\n")
        assert result.exit_code == 0
        assert "Cancelled" in result.output

    @respx.mock
    def test_delete_auth_error(self):
        respx.delete(f"{BASE}/vpclinks/vl-1").mock(
            return_value=httpx.Response(401, json={"message": "Unauthorized"})
        )
        result = runner.invoke(app, ["link", "delete", "vl-1", "--force", *COMMON_OPTS])
        assert result.exit_code == 3


class TestGlobalOptions:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "vpclink-cli" in result.output

    def test_no_url_configured(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("VPCLINK_API_URL", raising=False)
        monkeypatch.delenv("VPCLINK_PROFILE", raising=False)
        result = runner.invoke(app, ["link", "show", "vl-1"])
        assert result.exit_code == 6
