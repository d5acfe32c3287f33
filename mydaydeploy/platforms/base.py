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

"""Platform adapter protocol and registry for myday-deploy.

This module defines the foundational components for platform support:

- PlatformAdapter protocol: Interface that each platform generation implements
- AppRecord: The fields we read from an app record, whatever its shape
- Adapter registry: register_platform() and get_platform()

The two myday generations agree on the workflow but not on the details:

- v2 (legacy): ``/apps`` endpoints, flat app records, fixed token endpoint,
  one-step upload
- v3 (current): ``/app/store`` and ``/files`` endpoints, app records nested
  under ``model``, token endpoint from the discovery document, two-step
  upload (file first, then store registration)

All of that lives in one adapter per generation. The version lookup and the
upload both receive the adapter selected from the deployment config, so
they can never disagree about URLs or field names.

Design Philosophy:
    - Adapters are Protocol classes (structural subtyping, not inheritance)
    - Registration happens at module import time (adapters self-register)
    - Record field paths are JSONPath expressions (jsonpath-ng)
    - Adapters are stateless and instantiated on demand

Example:
    Look up an adapter and build the listing request:
        ```python
        from mydaydeploy.config import Platform, Scope
        from mydaydeploy.platforms import get_platform

        adapter = get_platform(Platform.CURRENT)
        request = adapter.build_listing_request("https://api.myday.cloud", Scope.GLOBAL)
        print(request)  # GET https://api.myday.cloud/app/store/all?collectionScope=Global
        ```
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from jsonpath_ng import parse as jsonpath_parse

from mydaydeploy.config.loader import Platform, Scope
from mydaydeploy.exceptions import InvalidPlatformError, UnexpectedResponseShapeError

if TYPE_CHECKING:
    from jsonpath_ng.jsonpath import JSONPath

    from mydaydeploy.io.client import ApiClient, ApiRequest
    from mydaydeploy.logging import Logger


@dataclass(frozen=True)
class AppRecord:
    """An application as reported by the myday API.

    Attributes:
        app_id: Application ID.
        version: Version string (semver).
        name: Display name, if the record has one.
    """

    app_id: str
    version: str
    name: str | None = None


# -------------------------------
# Adapter Protocol
# -------------------------------


class PlatformAdapter(Protocol):
    """Protocol for platform generation adapters.

    Attributes:
        platform: Platform generation this adapter serves.
        client_scope: OAuth scope to request from the Identity Server.
        uses_discovery: Whether the token endpoint comes from the OpenID
            discovery document (True) or the conventional path (False).
    """

    platform: Platform
    client_scope: str
    uses_discovery: bool

    def build_listing_request(self, base_url: str, scope: Scope) -> ApiRequest:
        """Build the request listing all apps in a scope."""
        ...

    def find_app(self, records: Any, app_id: str) -> AppRecord | None:
        """Find an app in a listing response.

        Returns:
            The matching record, or None when the app is not listed.

        Raises:
            UnexpectedResponseShapeError: If the listing is not an array or
                a record lacks the fields this platform guarantees.
        """
        ...

    def extract_version(self, records: Any, app_id: str) -> str | None:
        """Return the version of ``app_id`` from a listing, if present."""
        ...

    def build_upload_requests(
        self, base_url: str, app_id: str, scope: Scope, is_update: bool
    ) -> list[ApiRequest]:
        """Build the sequence of requests that publish a package.

        Requests that depend on an earlier response (the v3 ``fileId``) are
        returned with a placeholder and completed during upload().
        """
        ...

    def upload(
        self,
        client: ApiClient,
        file: Path,
        app_id: str,
        base_url: str,
        scope: Scope,
        is_update: bool,
        logger: Logger,
    ) -> AppRecord:
        """Upload the package and return the published app record."""
        ...


# -------------------------------
# Record helpers
# -------------------------------


def compile_path(expression: str) -> JSONPath:
    return jsonpath_parse(expression)


def first_value(path: JSONPath, obj: Any) -> Any:
    """Return the first JSONPath match in ``obj``, or None."""
    matches = path.find(obj)
    return matches[0].value if matches else None


def find_record(
    records: Any,
    app_id: str,
    id_path: JSONPath,
    version_path: JSONPath,
    name_path: JSONPath,
) -> AppRecord | None:
    """Locate ``app_id`` in a listing response using per-platform paths."""
    if not isinstance(records, list):
        raise UnexpectedResponseShapeError(
            f"Expected a list of apps, got {type(records).__name__}"
        )

    for index, record in enumerate(records):
        record_id = first_value(id_path, record)
        if record_id is None:
            raise UnexpectedResponseShapeError(
                f"App record #{index} has no '{id_path}' field"
            )
        if record_id == app_id:
            return parse_record(record, app_id, version_path, name_path)
    return None


def parse_record(
    body: Any,
    app_id: str,
    version_path: JSONPath,
    name_path: JSONPath,
) -> AppRecord:
    """Read the version and display name of ``app_id`` from a record."""
    version = first_value(version_path, body)
    if version is None:
        raise UnexpectedResponseShapeError(
            f"App record for {app_id} has no '{version_path}' field: {body!r:.200}"
        )
    name = first_value(name_path, body)
    return AppRecord(
        app_id=app_id,
        version=str(version),
        name=str(name) if name is not None else None,
    )


# -------------------------------
# Adapter Registry
# -------------------------------

_PLATFORM_REGISTRY: dict[Platform, type[PlatformAdapter]] = {}


def register_platform(
    platform: Platform, adapter_class: type[PlatformAdapter]
) -> None:
    """Register an adapter for a platform generation.

    Registering the same platform twice overwrites the previous adapter
    (allows monkey-patching for tests).
    """
    _PLATFORM_REGISTRY[platform] = adapter_class


def get_platform(platform: Platform | str) -> PlatformAdapter:
    """Get an adapter instance for a platform generation.

    Args:
        platform: Platform enum member or its value ("v2", "v3").

    Returns:
        A new adapter instance.

    Raises:
        InvalidPlatformError: If the platform is unknown or has no adapter.
    """
    try:
        key = Platform(platform)
    except ValueError as err:
        raise InvalidPlatformError(f"Unknown platform: {platform!r}") from err

    if key not in _PLATFORM_REGISTRY:
        available = ", ".join(p.value for p in _PLATFORM_REGISTRY)
        raise InvalidPlatformError(
            f"No adapter registered for platform {key.value!r}. "
            f"Available: {available or '(none)'}"
        )
    return _PLATFORM_REGISTRY[key]()
