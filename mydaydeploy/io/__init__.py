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

"""HTTP input/output for myday-deploy.

Public API:

ApiClient : class
    Immutable JSON client; with_bearer() returns an authenticated copy.
ApiRequest : class
    Method, URL and query parameters of a single API call.
make_session : function
    Create a requests.Session with default headers.

The package uploader lives in ``mydaydeploy.io.upload``.

Example:
    from mydaydeploy.io import ApiClient, make_session

    client = ApiClient(make_session(), timeout=30)
    apps = client.with_bearer(token).request(
        "GET", "https://api.myday.cloud/apps", params={"scope": "Global"}
    )

"""

from .client import ApiClient, ApiRequest, full_url, make_session

__all__ = ["ApiClient", "ApiRequest", "full_url", "make_session"]
