"""Configuration manager — read/write TOML config, resolve profiles."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import tomli_w

from vpclink_cli.client.errors import ConfigurationError
from vpclink_cli.config.constants import (
    CONFIG_FILE,
    DEFAULT_TIMEOUT,
    ENV_API_TOKEN,
    ENV_API_URL,
    ENV_PROFILE,
)
from vpclink_cli.config.models import CLIConfig, ControlPlaneProfile, WaitSettings

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib


class ConfigManager:
    """Manages CLI configuration on disk and resolves control-plane profiles."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path = config_path or CONFIG_FILE
        self._config: CLIConfig | None = None

    @property
    def config(self) -> CLIConfig:
        if self._config is None:
            self._config = self._load()
        return self._config

    def _load(self) -> CLIConfig:
        if not self.config_path.exists():
            return CLIConfig()
        try:
            data = tomllib.loads(self.config_path.read_text())
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"Invalid config file {self.config_path}: {exc}") from exc
        profiles: dict[str, ControlPlaneProfile] = {}
        for name, prof_data in data.get("profiles", {}).items():
            profiles[name] = ControlPlaneProfile(name=name, **prof_data)
        return CLIConfig(
            default_profile=data.get("default_profile"),
            wait=WaitSettings(**data.get("wait", {})),
            profiles=profiles,
        )

    def save(self) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        # Owner-only: profiles hold API keys
        os.chmod(self.config_path.parent, 0o700)
        data: dict[str, Any] = {}
        if self.config.default_profile:
            data["default_profile"] = self.config.default_profile
        wait = self.config.wait.model_dump(exclude_defaults=True)
        if wait:
            data["wait"] = wait
        if self.config.profiles:
            data["profiles"] = {
                name: profile.model_dump(exclude={"name"}, exclude_defaults=True)
                for name, profile in self.config.profiles.items()
            }
        # Atomic write: write to temp file, then rename
        temp = self.config_path.with_suffix(".tmp")
        fd = os.open(str(temp), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        try:
            os.write(fd, tomli_w.dumps(data).encode())
        finally:
            os.close(fd)
        temp.rename(self.config_path)

    def add_profile(self, profile: ControlPlaneProfile) -> None:
        self.config.profiles[profile.name] = profile
        if not self.config.default_profile:
            self.config.default_profile = profile.name
        self.save()

    def remove_profile(self, name: str) -> bool:
        if name not in self.config.profiles:
            return False
        del self.config.profiles[name]
        if self.config.default_profile == name:
            self.config.default_profile = next(iter(self.config.profiles), None)
        self.save()
        return True

    def set_default(self, name: str) -> bool:
        if name not in self.config.profiles:
            return False
        self.config.default_profile = name
        self.save()
        return True

    def get_profile(self, name: str | None = None) -> ControlPlaneProfile | None:
        if name:
            return self.config.profiles.get(name)
        default = self.config.default_profile
        if default:
            return self.config.profiles.get(default)
        return None

    def resolve_profile(
        self,
        profile_name: str | None = None,
        url: str | None = None,
        token: str | None = None,
    ) -> ControlPlaneProfile:
        """Resolve the control-plane connection.

        Precedence: CLI flags > env vars > config profile.
        """
        env_profile = os.environ.get(ENV_PROFILE)
        profile = self.get_profile(profile_name or env_profile)

        env_url = os.environ.get(ENV_API_URL)
        env_token = os.environ.get(ENV_API_TOKEN)

        resolved_url = url or env_url or (profile.url if profile else None)
        resolved_token = token or env_token or (profile.token if profile else None)

        if not resolved_url:
            raise ConfigurationError(
                "No control-plane URL configured. Use 'vpclink-cli config add' or set "
                f"{ENV_API_URL} or pass --url."
            )

        return ControlPlaneProfile(
            name=profile.name if profile else "cli",
            url=resolved_url.rstrip("/"),
            token=resolved_token,
            verify_ssl=profile.verify_ssl if profile else True,
            timeout=profile.timeout if profile else DEFAULT_TIMEOUT,
        )

    def wait_settings(self, timeout: float | None = None) -> WaitSettings:
        """Return the configured wait bounds, optionally overriding the timeout."""
        if timeout is None:
            return self.config.wait
        return WaitSettings(**{**self.config.wait.model_dump(), "timeout": timeout})
