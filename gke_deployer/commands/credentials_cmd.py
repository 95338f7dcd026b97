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

"""get-credentials and project-number subcommands."""

from __future__ import annotations

from pathlib import Path

import typer

from gke_deployer import console
from gke_deployer.config import DeployerConfig
from gke_deployer.credentials import get_cluster_credentials, get_project_number, location_flag
from gke_deployer.environment import configure_tool_context, resolve_endpoint
from gke_deployer.errors import DeployerError


def get_credentials(
    cluster: str = typer.Option(..., "--cluster", help="Cluster name"),
    project: str | None = typer.Option(None, "--project", help="GCP project ID (overrides GKE_PROJECT)"),
    region: str | None = typer.Option(None, "--region", help="Cluster region"),
    zone: str | None = typer.Option(None, "--zone", help="Cluster zone"),
    environment: str | None = typer.Option(
        None, "--environment", help="One of test, staging, staging2, prod, or an https://.../ endpoint"),
    kubeconfig: Path | None = typer.Option(
        None, "--kubeconfig", help="Kubeconfig file to write credentials to"),
) -> None:
    """Write cluster credentials into the wrapped tool's kubeconfig."""
    cfg = DeployerConfig().with_overrides(project=project, environment=environment, kubeconfig=kubeconfig)
    if not cfg.project:
        raise typer.BadParameter("--project (or GKE_PROJECT) must be set", param_hint="--project")
    try:
        location = location_flag(region=region, zone=zone)
    except ValueError as err:
        raise typer.BadParameter("exactly one of --region or --zone must be set") from err

    try:
        context = configure_tool_context(resolve_endpoint(cfg.environment), cfg.kubeconfig)
        get_cluster_credentials(cfg.project, location, cluster, context, binary=cfg.gcloud)
    except DeployerError as err:
        console.print(f"[red]\u274c {err}[/red]")
        raise typer.Exit(code=1) from err


def project_number(
    project: str | None = typer.Option(None, "--project", help="GCP project ID (overrides GKE_PROJECT)"),
) -> None:
    """Print the numeric project number of a project."""
    cfg = DeployerConfig().with_overrides(project=project)
    if not cfg.project:
        raise typer.BadParameter("--project (or GKE_PROJECT) must be set", param_hint="--project")
    try:
        number = get_project_number(cfg.project, binary=cfg.gcloud)
    except DeployerError as err:
        console.print(f"[red]\u274c {err}[/red]")
        raise typer.Exit(code=1) from err
    typer.echo(number)
