# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Deployment configuration loading and validation for myday-deploy.

Options reach the tool from up to three layers, merged with "last wins"
semantics:

1. **Options file** (``--config deploy.yaml``)
   - Optional YAML mapping using the CLI option names (``appId``, ``apiUrl``...)
   - Handy for per-environment settings kept next to a pipeline definition

2. **Environment** (``MYDAY_*`` variables, optionally from a ``.env`` file)
   - Keeps the client secret off the command line and out of shell history

3. **Command-line flags**
   - Always win over the other layers

A ``None`` value never overrides a value from a lower layer, so an option
that is simply not passed on the command line does not hide one from the
environment.

Validation
----------
``load_deployment_config`` turns the merged mapping into an immutable
``DeploymentConfig``. Validation stops at the first failure, in this order:

  1. Required options present (ConfigError)
  2. appId matches ``vendor.appname`` (InvalidIdentifierError)
  3. file exists and is readable (PackageNotFoundError)
  4. apiUrl and idSrvUrl are absolute http(s) URLs (InvalidUrlError)
  5. platform is ``v2`` or ``v3`` (InvalidPlatformError)
  6. verbose and silent are not both set (ConfigError)
  7. timeout is a positive number (ConfigError)

Nothing here touches the network.

Examples
--------
Programmatic usage:

    >>> from mydaydeploy.config import load_deployment_config
    >>> config = load_deployment_config({
    ...     "appId": "acme.timesheet",
    ...     "file": "dist/timesheet.zip",
    ...     "apiUrl": "https://api.myday.cloud",
    ...     "idSrvUrl": "https://identity.myday.cloud",
    ...     "clientId": "deploy-bot",
    ...     "clientSecret": "s3cret",
    ... })
    >>> config.scope
    <Scope.GLOBAL: 'Global'>
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
import os
from pathlib import Path
import re
from typing import Any
from urllib.parse import urlparse

from dotenv import find_dotenv, load_dotenv
import yaml

from mydaydeploy.exceptions import (
    ConfigError,
    InvalidIdentifierError,
    InvalidPlatformError,
    InvalidUrlError,
    PackageNotFoundError,
)

# Two lowercase alphanumeric segments, e.g. `tenantalias.appname`
APP_ID_PATTERN = re.compile(r"[a-z][a-z0-9]+\.[a-z][a-z0-9]+")

REQUIRED_OPTIONS = ("appId", "file", "apiUrl", "idSrvUrl", "clientId", "clientSecret")

KNOWN_OPTIONS = (
    "appId",
    "file",
    "platform",
    "tenantId",
    "apiUrl",
    "idSrvUrl",
    "clientId",
    "clientSecret",
    "verbose",
    "silent",
    "dryRun",
    "timeout",
)

# MYDAY_<suffix> -> option name
ENV_OPTIONS = {
    "APP_ID": "appId",
    "FILE": "file",
    "PLATFORM": "platform",
    "TENANT_ID": "tenantId",
    "API_URL": "apiUrl",
    "ID_SRV_URL": "idSrvUrl",
    "CLIENT_ID": "clientId",
    "CLIENT_SECRET": "clientSecret",
    "TIMEOUT": "timeout",
}

DEFAULT_PLATFORM = "v3"


class Platform(str, Enum):
    """myday platform generation."""

    LEGACY = "v2"
    CURRENT = "v3"


class Scope(str, Enum):
    """Collection an app belongs to: every tenant, or a single one."""

    GLOBAL = "Global"
    TENANT = "Tenant"


class OutputMode(str, Enum):
    VERBOSE = "verbose"
    NORMAL = "normal"
    SILENT = "silent"


@dataclass(frozen=True)
class DeploymentConfig:
    """Validated, immutable deployment settings.

    Attributes:
        app_id: Application ID, e.g. ``acme.timesheet``.
        file: Path to the zip archive (app package) to upload.
        platform: Target platform generation.
        tenant_id: Tenant ID, only set for tenant-level apps.
        api_url: Base URL for myday APIs, without trailing slash.
        id_srv_url: Base URL for the Identity Server, without trailing slash.
        client_id: OAuth client ID.
        client_secret: OAuth client secret.
        output_mode: How much to print.
        dry_run: Stop after the version lookup, never upload.
        timeout: Per-request timeout in seconds, None for no timeout.
    """

    app_id: str
    file: Path
    platform: Platform
    tenant_id: str | None
    api_url: str
    id_srv_url: str
    client_id: str
    client_secret: str
    output_mode: OutputMode = OutputMode.NORMAL
    dry_run: bool = False
    timeout: float | None = None

    @property
    def scope(self) -> Scope:
        """Tenant when a tenant ID is set, Global otherwise."""
        return Scope.TENANT if self.tenant_id else Scope.GLOBAL

    @property
    def client_scope(self) -> str:
        """OAuth scope requested for this platform."""
        from mydaydeploy.platforms import get_platform

        return get_platform(self.platform).client_scope

    def redacted(self) -> dict[str, str]:
        """Return a printable summary with the client secret masked."""
        return {
            "appId": self.app_id,
            "file": str(self.file),
            "platform": self.platform.value,
            "tenantId": self.tenant_id or "-",
            "scope": self.scope.value,
            "apiUrl": self.api_url,
            "idSrvUrl": self.id_srv_url,
            "clientId": self.client_id,
            "clientSecret": mask_secret(self.client_secret),
            "clientScope": self.client_scope,
            "dryRun": str(self.dry_run).lower(),
        }


def mask_secret(secret: str) -> str:
    """Show only the first and last character of a secret.

    Example:
        >>> mask_secret("s3cret")
        's****t'
    """
    if len(secret) <= 2:
        return "*" * len(secret)
    return secret[0] + "*" * (len(secret) - 2) + secret[-1]


# -------------------------------
# Option sources
# -------------------------------


def load_options_file(path: Path) -> dict[str, Any]:
    """Load deployment options from a YAML file.

    Args:
        path: YAML file with a top-level mapping of option names.

    Returns:
        The options mapping (empty for an empty file).

    Raises:
        ConfigError: If the file is missing, is not valid YAML, is not a
            mapping or contains unknown option names.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Options file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as err:
        raise ConfigError(f"Error parsing YAML: {path}: {err}") from err

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Top-level YAML must be a mapping (dict): {path}")

    unknown = sorted(str(key) for key in data if key not in KNOWN_OPTIONS)
    if unknown:
        raise ConfigError(f"Unknown option(s) in {path}: {', '.join(unknown)}")
    return data


def options_from_env(
    prefix: str = "MYDAY_",
    *,
    dotenv_path: Path | None = None,
    use_dotenv: bool = True,
) -> dict[str, Any]:
    """Read deployment options from ``MYDAY_*`` environment variables.

    A ``.env`` file (``dotenv_path``, or the nearest one from the current
    directory upwards) is loaded first when present; variables already set
    in the environment take precedence over it.
    """
    if use_dotenv:
        load_dotenv(dotenv_path or find_dotenv(usecwd=True))

    options: dict[str, Any] = {}
    for suffix, name in ENV_OPTIONS.items():
        value = os.getenv(f"{prefix}{suffix}")
        if value:
            options[name] = value
    return options


def merge_options(*layers: Mapping[str, Any] | None) -> dict[str, Any]:
    """Merge option layers, later layers win; None values never override."""
    merged: dict[str, Any] = {}
    for layer in layers:
        if not layer:
            continue
        for key, value in layer.items():
            if value is not None:
                merged[key] = value
    return merged


# -------------------------------
# Validation
# -------------------------------


def _as_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("", "0", "false", "no", "off"):
        return False
    raise ConfigError(f"Invalid boolean value for {name}: {value!r}")


def _validate_app_id(value: str) -> str:
    if not APP_ID_PATTERN.fullmatch(value):
        raise InvalidIdentifierError(f"Invalid appId format: {value!r}")
    return value


def _validate_file(value: Any) -> Path:
    path = Path(value).expanduser()
    if not path.is_file() or not os.access(path, os.R_OK):
        raise PackageNotFoundError(
            f"Invalid file path or file does not exist: {path}"
        )
    return path


def _validate_url(name: str, value: str) -> str:
    try:
        parsed = urlparse(value)
    except ValueError as err:
        raise InvalidUrlError(f"Invalid {name} address: {value!r}") from err
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidUrlError(f"Invalid {name} address: {value!r}")
    return value.rstrip("/")


def _validate_platform(value: Any) -> Platform:
    try:
        return Platform(str(value).strip().lower())
    except ValueError as err:
        choices = ", ".join(p.value for p in Platform)
        raise InvalidPlatformError(
            f"Invalid platform: {value!r}. Choose from: {choices}"
        ) from err


def _validate_timeout(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError) as err:
        raise ConfigError(f"Invalid timeout: {value!r}") from err
    if timeout <= 0:
        raise ConfigError(f"Timeout must be positive, got {value!r}")
    return timeout


def load_deployment_config(options: Mapping[str, Any]) -> DeploymentConfig:
    """Validate raw options and build a DeploymentConfig.

    Args:
        options: Mapping of option names (CLI spelling, e.g. ``appId``) to
            values, typically the result of merge_options().

    Returns:
        The validated configuration.

    Raises:
        ConfigError: For the first validation failure encountered. The
            subclass tells which check failed.
    """
    missing = [
        name
        for name in REQUIRED_OPTIONS
        if options.get(name) is None or str(options[name]).strip() == ""
    ]
    if missing:
        raise ConfigError(f"Missing required option(s): {', '.join(missing)}")

    app_id = _validate_app_id(str(options["appId"]))
    file = _validate_file(options["file"])
    api_url = _validate_url("apiUrl", str(options["apiUrl"]))
    id_srv_url = _validate_url("idSrvUrl", str(options["idSrvUrl"]))
    platform = _validate_platform(options.get("platform") or DEFAULT_PLATFORM)

    verbose = _as_bool("verbose", options.get("verbose"))
    silent = _as_bool("silent", options.get("silent"))
    if verbose and silent:
        raise ConfigError("Options verbose and silent are mutually exclusive")
    if verbose:
        output_mode = OutputMode.VERBOSE
    elif silent:
        output_mode = OutputMode.SILENT
    else:
        output_mode = OutputMode.NORMAL

    tenant_id = options.get("tenantId")
    tenant_id = str(tenant_id).strip() if tenant_id is not None else ""

    return DeploymentConfig(
        app_id=app_id,
        file=file,
        platform=platform,
        tenant_id=tenant_id or None,
        api_url=api_url,
        id_srv_url=id_srv_url,
        client_id=str(options["clientId"]),
        client_secret=str(options["clientSecret"]),
        output_mode=output_mode,
        dry_run=_as_bool("dryRun", options.get("dryRun")),
        timeout=_validate_timeout(options.get("timeout")),
    )
