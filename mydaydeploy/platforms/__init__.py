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

"""Platform adapters for myday-deploy.

Each myday platform generation gets one adapter that knows its endpoint
shapes, record field paths, OAuth scope and token endpoint resolution.

Available Adapters:
    v2 : LegacyPlatform
        ``/apps`` endpoints, flat records, single-request upload.
    v3 : CurrentPlatform
        ``/app/store`` and ``/files`` endpoints, records nested under
        ``model``, upload then store registration.

Example:

    from mydaydeploy.platforms import get_platform

    adapter = get_platform("v2")
    print(adapter.client_scope)  # myday-api

"""

from .base import AppRecord, PlatformAdapter, get_platform, register_platform

# Import adapter modules to trigger self-registration
from . import current, legacy  # noqa: E402, F401, I001

__all__ = ["AppRecord", "PlatformAdapter", "get_platform", "register_platform"]
