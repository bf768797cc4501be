"""Default paths, environment variable names, and constants."""

from __future__ import annotations

import platformdirs

APP_NAME = "vpclink-cli"
APP_AUTHOR = "vpclink"

CONFIG_DIR = platformdirs.user_config_path(APP_NAME, APP_AUTHOR)
CONFIG_FILE = CONFIG_DIR / "config.toml"

# Environment variable names
ENV_API_URL = "VPCLINK_API_URL"
ENV_API_TOKEN = "VPCLINK_API_TOKEN"
ENV_PROFILE = "VPCLINK_PROFILE"

# API defaults
VPC_LINKS_PATH = "/vpclinks"
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_RETRIES = 3

# Provisioning wait defaults (seconds)
DEFAULT_WAIT_TIMEOUT = 600.0
DEFAULT_WAIT_DELAY = 10.0
DEFAULT_WAIT_MIN_INTERVAL = 3.0
