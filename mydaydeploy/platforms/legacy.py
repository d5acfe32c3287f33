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
Legacy (v2) myday platform adapter.

Endpoints:
    GET  {api}/apps?scope={scope}                        list apps
    POST {api}/apps/upload?appId={id}&scope={scope}      first upload
    POST {api}/apps/update?appId={id}&scope={scope}      update

App records are flat: ``{"id": ..., "name": ..., "version": ...}``. The
upload response is the app record itself, so a single multipart request
publishes the package.

The Identity Server token endpoint is the conventional
``{idsrv}/connect/token``; the OAuth scope is ``myday-api``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from mydaydeploy.config.loader import Platform, Scope
from mydaydeploy.io.client import ApiClient, ApiRequest
from mydaydeploy.logging import Logger

from .base import AppRecord, compile_path, find_record, parse_record, register_platform


class LegacyPlatform:
    """Adapter for the v2 myday platform."""

    platform = Platform.LEGACY
    client_scope = "myday-api"
    uses_discovery = False

    ID_PATH = compile_path("id")
    VERSION_PATH = compile_path("version")
    NAME_PATH = compile_path("name")

    def build_listing_request(self, base_url: str, scope: Scope) -> ApiRequest:
        return ApiRequest("GET", f"{base_url}/apps", {"scope": scope.value})

    def find_app(self, records: Any, app_id: str) -> AppRecord | None:
        return find_record(
            records, app_id, self.ID_PATH, self.VERSION_PATH, self.NAME_PATH
        )

    def extract_version(self, records: Any, app_id: str) -> str | None:
        found = self.find_app(records, app_id)
        return found.version if found else None

    def build_upload_requests(
        self, base_url: str, app_id: str, scope: Scope, is_update: bool
    ) -> list[ApiRequest]:
        action = "update" if is_update else "upload"
        return [
            ApiRequest(
                "POST",
                f"{base_url}/apps/{action}",
                {"appId": app_id, "scope": scope.value},
            )
        ]

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
        (upload_request,) = self.build_upload_requests(
            base_url, app_id, scope, is_update
        )
        logger.verbose("UPLOAD", f"Uploading zip file: {upload_request}")
        body = client.send_file(upload_request, file)
        return parse_record(body, app_id, self.VERSION_PATH, self.NAME_PATH)


register_platform(Platform.LEGACY, LegacyPlatform)
