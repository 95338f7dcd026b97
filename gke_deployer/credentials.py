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

"""Cluster credential retrieval and project lookups through the wrapped tool."""

from __future__ import annotations

from collections.abc import Callable

from gke_deployer import console, process
from gke_deployer.constants import DEFAULT_GCLOUD, PROJECT_NUMBER_FORMAT
from gke_deployer.errors import (
    GetCredentialsFailed,
    ProcessExecutionFailed,
    ProjectNumberLookupFailed,
)
from gke_deployer.models import Invocation, OutputPolicy, ToolContext
from gke_deployer.process import Runner


def location_flag(region: str | None = None, zone: str | None = None) -> str:
    """Build the ``--region``/``--zone`` argument for a cluster command.

    Raises:
        ValueError: Unless exactly one of *region* and *zone* is given.
    """
    if bool(region) == bool(zone):
        raise ValueError("exactly one of region or zone must be set")
    return f"--region={region}" if region else f"--zone={zone}"


def get_cluster_credentials(
    project: str,
    location: str,
    cluster: str,
    context: ToolContext | None = None,
    runner: Runner | None = None,
    binary: str = DEFAULT_GCLOUD,
) -> None:
    """Have the wrapped tool write credentials for *cluster* into its kubeconfig.

    Args:
        project: GCP project ID owning the cluster.
        location: Location argument from :func:`location_flag`.
        cluster: Cluster name.
        context: Wrapped-tool context from preparation.
        runner: Process runner, defaults to :func:`process.run`.
        binary: Wrapped tool binary.

    Raises:
        GetCredentialsFailed: If the wrapped tool fails.
    """
    runner = runner or process.run
    invocation = Invocation.container(
        "clusters", "get-credentials", cluster, f"--project={project}", location, binary=binary,
    )
    try:
        process.raise_for_result(runner(invocation, OutputPolicy.INHERIT, context))
    except ProcessExecutionFailed as err:
        raise GetCredentialsFailed(cluster, str(err)) from err
    console.print(f"[green]\u2705 Fetched credentials for cluster {cluster}[/green]")


def get_project_number(
    project_id: str,
    context: ToolContext | None = None,
    capture: Callable[[Invocation, ToolContext | None], str] | None = None,
    binary: str = DEFAULT_GCLOUD,
) -> str:
    """Look up the numeric project number of *project_id*.

    Raises:
        ProjectNumberLookupFailed: If the wrapped tool fails.
    """
    capture = capture or process.output
    invocation = Invocation.gcloud(
        "projects", "describe", project_id, f"--format={PROJECT_NUMBER_FORMAT}", binary=binary,
    )
    try:
        return capture(invocation, context).strip()
    except ProcessExecutionFailed as err:
        raise ProjectNumberLookupFailed(project_id, str(err)) from err
