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
Current (v3) myday platform adapter.

Endpoints:
    GET  {api}/app/store/all?collectionScope={scope}                   list apps
    POST {api}/files/file?virtualPath=apps&collectionScope={scope}     upload archive
    POST {api}/app/store?appId={id}&collectionScope={scope}&fileId={f} first upload
    PUT  {api}/app/store?appId={id}&collectionScope={scope}&fileId={f} update

Listing entries wrap the app record (plus its version history) in a
``model`` object; display names are localised under ``names``. Publishing
takes two requests: the archive goes to the Files API first, then the
returned ``fileId`` is registered with the app store. If registration
fails, the uploaded file is left behind.

The token endpoint is read from the Identity Server discovery document;
the OAuth scope is ``myday_api``.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any

from mydaydeploy.config.loader import Platform, Scope
from mydaydeploy.exceptions import UnexpectedResponseShapeError
from mydaydeploy.io.client import ApiClient, ApiRequest
from mydaydeploy.logging import Logger

from .base import (
    AppRecord,
    compile_path,
    find_record,
    first_value,
    parse_record,
    register_platform,
)

DISPLAY_LOCALE = "en-GB"


class CurrentPlatform:
    """Adapter for the v3 myday platform."""

    platform = Platform.CURRENT
    client_scope = "myday_api"
    uses_discovery = True

    # Listing entries nest the record under `model`
    LIST_ID_PATH = compile_path("model.id")
    LIST_VERSION_PATH = compile_path("model.version")
    LIST_NAME_PATH = compile_path(f"model.names.'{DISPLAY_LOCALE}'")

    # Store responses are the bare record
    VERSION_PATH = compile_path("version")
    NAME_PATH = compile_path(f"names.'{DISPLAY_LOCALE}'")

    FILE_ID_PATH = compile_path("fileId")
    FILE_SIZE_PATH = compile_path("fileSize")

    def build_listing_request(self, base_url: str, scope: Scope) -> ApiRequest:
        return ApiRequest(
            "GET", f"{base_url}/app/store/all", {"collectionScope": scope.value}
        )

    def find_app(self, records: Any, app_id: str) -> AppRecord | None:
        return find_record(
            records,
            app_id,
            self.LIST_ID_PATH,
            self.LIST_VERSION_PATH,
            self.LIST_NAME_PATH,
        )

    def extract_version(self, records: Any, app_id: str) -> str | None:
        found = self.find_app(records, app_id)
        return found.version if found else None

    def build_upload_requests(
        self, base_url: str, app_id: str, scope: Scope, is_update: bool
    ) -> list[ApiRequest]:
        """Build the file upload and store registration requests.

        The registration request still lacks ``fileId``; upload() adds it
        once the Files API has answered.
        """
        return [
            ApiRequest(
                "POST",
                f"{base_url}/files/file",
                {"virtualPath": "apps", "collectionScope": scope.value},
            ),
            ApiRequest(
                "PUT" if is_update else "POST",
                f"{base_url}/app/store",
                {"appId": app_id, "collectionScope": scope.value},
            ),
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
        file_request, store_request = self.build_upload_requests(
            base_url, app_id, scope, is_update
        )

        logger.verbose("UPLOAD", f"Uploading zip file: {file_request}")
        uploaded = client.send_file(file_request, file)
        file_id = first_value(self.FILE_ID_PATH, uploaded)
        if not file_id:
            raise UnexpectedResponseShapeError(
                f"Files API response has no 'fileId': {uploaded!r:.200}"
            )
        file_size = first_value(self.FILE_SIZE_PATH, uploaded)
        logger.verbose("UPLOAD", f"Uploaded file {file_id} ({file_size or '?'} B)")

        store_request = replace(
            store_request, params={**store_request.params, "fileId": str(file_id)}
        )
        logger.verbose("UPLOAD", f"Registering app: {store_request}")
        body = client.send(store_request)
        return parse_record(body, app_id, self.VERSION_PATH, self.NAME_PATH)


register_platform(Platform.CURRENT, CurrentPlatform)
