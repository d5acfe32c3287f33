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
OAuth2 client-credentials authentication against the myday Identity Server.

The access token is requested once per run. Its expiry (usually one hour)
is not tracked: a deployment finishes well within a token's lifetime.

Token endpoint resolution:
- Discovery: ``{idsrv}/.well-known/openid-configuration`` -> ``token_endpoint``
- Conventional path: ``{idsrv}/connect/token``

The OAuth client must be registered on every environment you deploy to.
"""

from __future__ import annotations

from typing import Any

import requests

from mydaydeploy.exceptions import AuthenticationFailedError, MydayDeployError
from mydaydeploy.io.client import ApiClient, make_session
from mydaydeploy.logging import Logger, get_global_logger

DISCOVERY_PATH = "/.well-known/openid-configuration"
TOKEN_PATH = "/connect/token"


def resolve_token_endpoint(
    client: ApiClient, identity_url: str, use_discovery: bool
) -> str:
    """Return the token endpoint of an Identity Server.

    Raises:
        AuthenticationFailedError: If the discovery document cannot be
            fetched or has no ``token_endpoint``.
    """
    identity_url = identity_url.rstrip("/")
    if not use_discovery:
        return identity_url + TOKEN_PATH

    try:
        document = client.request("GET", identity_url + DISCOVERY_PATH)
    except MydayDeployError as err:
        raise AuthenticationFailedError(
            f"Could not read Identity Server discovery document: {err}"
        ) from err

    endpoint = document.get("token_endpoint") if isinstance(document, dict) else None
    if not endpoint:
        raise AuthenticationFailedError(
            "Identity Server discovery document has no token_endpoint"
        )
    return str(endpoint)


def request_access_token(
    client: ApiClient,
    token_endpoint: str,
    client_id: str,
    client_secret: str,
    scope: str,
) -> str:
    """Run the client-credentials grant and return the access token.

    Raises:
        AuthenticationFailedError: If the request fails or the response has
            no access token.
    """
    data = {
        "grant_type": "client_credentials",
        "client_id": client_id,
        "client_secret": client_secret,
        "scope": scope,
    }
    try:
        token_data: Any = client.request("POST", token_endpoint, data=data)
    except MydayDeployError as err:
        raise AuthenticationFailedError(
            f"Access token request for client {client_id!r} failed: {err}"
        ) from err

    token = token_data.get("access_token") if isinstance(token_data, dict) else None
    if not token:
        raise AuthenticationFailedError("Token response has no access_token")
    return str(token)


def authorize(
    identity_url: str,
    client_id: str,
    client_secret: str,
    scope: str,
    *,
    use_discovery: bool = True,
    session: requests.Session | None = None,
    timeout: float | None = None,
    logger: Logger | None = None,
) -> ApiClient:
    """Obtain an access token and return a client that sends it.

    Args:
        identity_url: Base URL of the Identity Server.
        client_id: OAuth client ID.
        client_secret: OAuth client secret.
        scope: OAuth scopes to request, separated by spaces.
        use_discovery: Read the token endpoint from the discovery document
            instead of using ``/connect/token``.
        session: Session to send requests with (a new one by default).
        timeout: Per-request timeout in seconds.
        logger: Output logger (defaults to the global logger).

    Returns:
        A new ApiClient carrying ``Authorization: Bearer <token>``.

    Raises:
        AuthenticationFailedError: On any failure. Never retried.
    """
    if logger is None:
        logger = get_global_logger()

    client = ApiClient(session or make_session(), timeout=timeout)

    if use_discovery:
        logger.verbose("AUTH", "Requesting Identity Server details...")
    token_endpoint = resolve_token_endpoint(client, identity_url, use_discovery)
    logger.verbose("AUTH", f"Token endpoint: {token_endpoint}")

    logger.verbose("AUTH", f"Requesting an access token (scope: {scope})...")
    token = request_access_token(
        client, token_endpoint, client_id, client_secret, scope
    )
    logger.verbose("AUTH", f"Access token received ({len(token)} characters)")

    return client.with_bearer(token)
