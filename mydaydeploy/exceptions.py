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

"""Exception hierarchy for myday-deploy.

This module defines a custom exception hierarchy that allows library users
to distinguish between different types of errors:

- ConfigError: Invalid or missing options, raised before any network call
- NetworkError: Identity Server or myday API failures
- UnexpectedResponseShapeError: The API answered, but not with what we expected

All exceptions inherit from MydayDeployError, allowing users to catch all
errors with a single except clause if needed. None of them are retried;
every error aborts the deployment.

Example:
    Catching specific error types:
        ```python
        from mydaydeploy.core import deploy_app
        from mydaydeploy.exceptions import AuthenticationFailedError, NetworkError

        try:
            result = deploy_app(config)
        except AuthenticationFailedError as e:
            print(f"Check your client credentials: {e}")
        except NetworkError as e:
            print(f"Network error: {e}")
        ```

    Catching all errors:
        ```python
        from mydaydeploy.exceptions import MydayDeployError

        try:
            result = deploy_app(config)
        except MydayDeployError as e:
            print(f"Deployment failed: {e}")
        ```
"""

from __future__ import annotations

__all__ = [
    "MydayDeployError",
    "ConfigError",
    "InvalidIdentifierError",
    "PackageNotFoundError",
    "InvalidUrlError",
    "InvalidPlatformError",
    "NetworkError",
    "AuthenticationFailedError",
    "ApiRequestFailedError",
    "UnexpectedResponseShapeError",
]


class MydayDeployError(Exception):
    """Base exception for all myday-deploy errors."""

    pass


class ConfigError(MydayDeployError):
    """Raised for configuration-related errors.

    This exception (or one of its subclasses) is raised when there are
    problems with:

    - Missing required options
    - Conflicting output flags (verbose and silent together)
    - Unreadable or malformed YAML options files
    - Invalid option values

    Configuration errors are always reported before any network activity.
    """

    pass


class InvalidIdentifierError(ConfigError):
    """Raised when the application ID is not of the form `vendor.appname`."""

    pass


class PackageNotFoundError(ConfigError):
    """Raised when the package archive does not exist or cannot be read."""

    pass


class InvalidUrlError(ConfigError):
    """Raised when an API or Identity Server URL is not an absolute URL."""

    pass


class InvalidPlatformError(ConfigError):
    """Raised when the platform version is not one of the supported ones."""

    pass


class NetworkError(MydayDeployError):
    """Raised for Identity Server and myday API failures."""

    pass


class AuthenticationFailedError(NetworkError):
    """Raised when an access token cannot be obtained.

    Covers discovery document failures, rejected client credentials and
    token responses without an `access_token`.
    """

    pass


class ApiRequestFailedError(NetworkError):
    """Raised when a myday API request fails.

    Attributes:
        status_code: HTTP status code of the failed response, or None when
            no response was received (connection error, timeout).
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UnexpectedResponseShapeError(MydayDeployError):
    """Raised when a response body is missing fields we rely on.

    Example:
        A listing response that is not a JSON array, or an upload response
        without a `fileId`.
    """

    pass
