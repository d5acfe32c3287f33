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

"""Deployment configuration for myday-deploy.

This package turns raw options (YAML file, ``MYDAY_*`` environment
variables, command-line flags) into a validated, immutable
``DeploymentConfig``.

Public API:

- load_deployment_config: Validate options and build a DeploymentConfig
- load_options_file: Read options from a YAML file
- options_from_env: Read options from the environment (and ``.env``)
- merge_options: Merge option layers, last wins

Example:
    Basic usage:

        from mydaydeploy.config import load_deployment_config, merge_options

        config = load_deployment_config(merge_options(file_options, cli_options))
        print(config.scope)  # Scope.GLOBAL

"""

from .loader import (
    DeploymentConfig,
    OutputMode,
    Platform,
    Scope,
    load_deployment_config,
    load_options_file,
    mask_secret,
    merge_options,
    options_from_env,
)

__all__ = [
    "DeploymentConfig",
    "OutputMode",
    "Platform",
    "Scope",
    "load_deployment_config",
    "load_options_file",
    "mask_secret",
    "merge_options",
    "options_from_env",
]
