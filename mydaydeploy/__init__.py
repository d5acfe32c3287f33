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

"""myday-deploy - upload and update apps on the myday platform

A command-line tool (and small library) that authenticates with the myday
Identity Server using OAuth client credentials and publishes an app package
to the myday app store, either as a first upload or as a new version.

myday-deploy provides:

- Both platform generations: v2 (legacy) and v3 (current)
- Global and tenant-level apps
- Dry runs that only report the currently published version
- Options from flags, ``MYDAY_*`` environment variables or a YAML file

Quick Start:

    $ myday-deploy --appId acme.timesheet --file timesheet.zip \\
        --apiUrl https://api.myday.cloud --idSrvUrl https://identity.myday.cloud \\
        --clientId deploy-bot --clientSecret "$SECRET" --dryRun

For full CLI documentation:

    $ myday-deploy --help

For more details, see the individual module docstrings.
"""

__version__ = "1.0.0"
__author__ = "Roger Cibrian"
__license__ = "Apache-2.0"
__description__ = "Upload and update apps on the myday platform"

# Re-export commonly used functions for convenience
from mydaydeploy.auth import authorize
from mydaydeploy.config import (
    DeploymentConfig,
    OutputMode,
    Platform,
    Scope,
    load_deployment_config,
)
from mydaydeploy.core import deploy_app
from mydaydeploy.exceptions import (
    ApiRequestFailedError,
    AuthenticationFailedError,
    ConfigError,
    InvalidIdentifierError,
    InvalidPlatformError,
    InvalidUrlError,
    MydayDeployError,
    NetworkError,
    PackageNotFoundError,
    UnexpectedResponseShapeError,
)
from mydaydeploy.io.upload import upload_app
from mydaydeploy.results import DeployResult
from mydaydeploy.versioning import get_current_version

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "__description__",
    "DeployResult",
    "DeploymentConfig",
    "OutputMode",
    "Platform",
    "Scope",
    "authorize",
    "deploy_app",
    "get_current_version",
    "load_deployment_config",
    "upload_app",
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
