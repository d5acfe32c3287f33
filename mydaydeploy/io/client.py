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
HTTP client value for myday API calls.

The client is an immutable value: ``ApiClient.with_bearer()`` returns a new
client carrying the ``Authorization`` header and leaves the original alone.
The authenticated client is then passed explicitly to the version lookup and
the upload, so there is no shared, progressively reconfigured request helper.

Key Features:

- **JSON by default** - Every response body is decoded as JSON; an empty
  body decodes to None.
- **Uniform errors** - Connection failures and non-2xx responses raise
  ApiRequestFailedError (with the status code when there is one); bodies that
  are not JSON raise UnexpectedResponseShapeError. Errors are chained.
- **No retries** - A failed call aborts the deployment. Upload requests are
  not idempotent, so transparently retrying them is never safe here.

Example:
    >>> from mydaydeploy.io import ApiClient, make_session
    >>> client = ApiClient(make_session()).with_bearer("eyJ0eXAi...")
    >>> apps = client.request("GET", "https://api.myday.cloud/apps",
    ...                       params={"scope": "Global"})
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any

import requests

from mydaydeploy import __version__
from mydaydeploy.exceptions import ApiRequestFailedError, UnexpectedResponseShapeError

# Characters of an error response body echoed back in exception messages
ERROR_BODY_PREVIEW = 300


def make_session() -> requests.Session:
    """Create a requests.Session with myday-deploy's default headers."""
    s = requests.Session()
    s.headers.update(
        {
            "User-Agent": f"myday-deploy/{__version__}",
            "Accept": "application/json",
        }
    )
    return s


def full_url(url: str, params: Mapping[str, str] | None = None) -> str:
    """Return ``url`` with ``params`` encoded into its query string."""
    prepared = requests.PreparedRequest()
    prepared.prepare_url(url, dict(params or {}))
    return prepared.url or url


@dataclass(frozen=True)
class ApiRequest:
    """A single API call built by a platform adapter.

    Attributes:
        method: HTTP method, e.g. "GET".
        url: Endpoint URL without query string.
        params: Query parameters.
    """

    method: str
    url: str
    params: Mapping[str, str] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"{self.method} {full_url(self.url, self.params)}"


@dataclass(frozen=True)
class ApiClient:
    """Immutable HTTP client for the Identity Server and myday APIs.

    Attributes:
        session: Underlying requests session (connection pooling only; the
            client never changes its headers).
        headers: Extra headers sent with every request.
        timeout: Per-request timeout in seconds, None for no timeout.
    """

    session: requests.Session
    headers: Mapping[str, str] = field(default_factory=dict)
    timeout: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @property
    def is_authenticated(self) -> bool:
        return "Authorization" in self.headers

    def with_bearer(self, token: str) -> ApiClient:
        """Return a copy of this client that authenticates with ``token``."""
        return replace(
            self, headers={**self.headers, "Authorization": f"Bearer {token}"}
        )

    def send(self, api_request: ApiRequest, **kwargs: Any) -> Any:
        """Execute an ApiRequest; keyword arguments go to request()."""
        return self.request(
            api_request.method, api_request.url, params=api_request.params, **kwargs
        )

    def send_file(
        self, api_request: ApiRequest, file: Path, field_name: str = "file"
    ) -> Any:
        """Execute an ApiRequest with ``file`` as a multipart form field.

        The archive is opened read-only right before the request and closed
        as soon as it completes or fails.
        """
        file = Path(file)
        with file.open("rb") as f:
            return self.send(
                api_request, files={field_name: (file.name, f, "application/zip")}
            )

    def request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        data: Mapping[str, str] | None = None,
        files: Mapping[str, Any] | None = None,
    ) -> Any:
        """Perform a request and decode its JSON body.

        Args:
            method: HTTP method.
            url: Endpoint URL.
            params: Query parameters.
            data: Form fields (sent form-encoded unless files are given).
            files: Multipart file fields, as accepted by requests.

        Returns:
            The decoded JSON body, or None for an empty body.

        Raises:
            ApiRequestFailedError: On connection errors and non-2xx responses.
            UnexpectedResponseShapeError: If the body is not valid JSON.
        """
        target = full_url(url, params)
        try:
            resp = self.session.request(
                method,
                url,
                params=dict(params) if params else None,
                data=data,
                files=files,
                headers=dict(self.headers),
                timeout=self.timeout,
            )
        except requests.RequestException as err:
            raise ApiRequestFailedError(f"{method} {target} failed: {err}") from err

        try:
            resp.raise_for_status()
        except requests.HTTPError as err:
            detail = resp.text.strip()[:ERROR_BODY_PREVIEW]
            message = f"{method} {target} failed with HTTP {resp.status_code}"
            if detail:
                message += f": {detail}"
            raise ApiRequestFailedError(message, status_code=resp.status_code) from err

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as err:
            raise UnexpectedResponseShapeError(
                f"{method} {target} returned a body that is not JSON"
            ) from err
