# /*
# Copyright 2026 The Kubernetes Authors.
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
# */

"""Environment endpoint resolution and wrapped-tool context construction."""

from __future__ import annotations

from pathlib import Path

from gke_deployer.constants import (
    ENDPOINTS,
    ENV_CONTAINER_ENDPOINT,
    ENV_KUBECONFIG,
    ENV_PRINT_TRACEBACKS,
    URL_PATTERN,
)
from gke_deployer.errors import EnvironmentSetupFailed, InvalidEnvironment
from gke_deployer.models import ToolContext


def resolve_endpoint(environment: str) -> str:
    """Map an environment name to its container API endpoint.

    Well-known names are matched exactly and win over the URL pattern; any
    other value matching the pattern is used as the endpoint itself.

    Args:
        environment: Well-known environment name or a literal endpoint URL.

    Returns:
        Container API endpoint URL.

    Raises:
        InvalidEnvironment: If the value is neither a known name nor a URL.
    """
    if environment in ENDPOINTS:
        return ENDPOINTS[environment]
    if URL_PATTERN.search(environment):
        return environment
    raise InvalidEnvironment(environment, list(ENDPOINTS), URL_PATTERN.pattern)


def _check_variable(name: str, value: str) -> None:
    """Reject variables the OS would refuse to pass to a child process."""
    if not name or "=" in name or "\x00" in name:
        raise EnvironmentSetupFailed(name, value, "invalid variable name")
    if "\x00" in value:
        raise EnvironmentSetupFailed(name, value, "value contains a NUL byte")


def configure_tool_context(endpoint: str, kubeconfig: Path | None = None) -> ToolContext:
    """Build the wrapped tool's runtime context for *endpoint*.

    Enables unhandled traceback printing and overrides the container API
    endpoint. When *kubeconfig* is set, credentials fetched later are written
    to that file.

    Args:
        endpoint: Container API endpoint from :func:`resolve_endpoint`.
        kubeconfig: Optional kubeconfig file for fetched credentials.

    Raises:
        EnvironmentSetupFailed: If any variable cannot be passed to a child.
    """
    env = {
        ENV_PRINT_TRACEBACKS: "1",
        ENV_CONTAINER_ENDPOINT: endpoint,
    }
    if kubeconfig is not None:
        env[ENV_KUBECONFIG] = str(kubeconfig)
    for name, value in env.items():
        _check_variable(name, value)
    return ToolContext(env=env)


def home_path(*parts: str, home: Path | None = None) -> Path:
    """Return the user's home directory joined with *parts*."""
    return (home if home is not None else Path.home()).joinpath(*parts)
