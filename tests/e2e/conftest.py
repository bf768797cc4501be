"""E2E test configuration — credentials for a live control plane."""

from __future__ import annotations

import pytest


@pytest.fixture
def api_opts(request):
    url = request.config.getoption("--api-url")
    token = request.config.getoption("--api-token")
    target = request.config.getoption("--target-arn")
    if not url or not token or not target:
        pytest.skip("Live control-plane credentials not provided")
    return ["--url", url, "--token", token]


@pytest.fixture
def target_arn(request) -> str:
    return request.config.getoption("--target-arn")
