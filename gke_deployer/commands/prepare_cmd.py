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

"""prepare subcommand."""

from __future__ import annotations

from pathlib import Path

import typer

from gke_deployer import console
from gke_deployer.config import DeployerConfig, display_config
from gke_deployer.errors import DeployerError
from gke_deployer.prepare import prepare_gcp


def prepare(
    project: str | None = typer.Option(None, "--project", help="GCP project ID (overrides GKE_PROJECT)"),
    environment: str | None = typer.Option(
        None, "--environment", help="One of test, staging, staging2, prod, or an https://.../ endpoint"),
    gcp_service_account: str | None = typer.Option(
        None, "--gcp-service-account", help="Service account key file to activate"),
    ignore_gcp_ssh_key: bool = typer.Option(
        False, "--ignore-gcp-ssh-key", help="Skip the GCP ssh key check (overrides GKE_IGNORE_GCP_SSH_KEY)"),
    kubeconfig: Path | None = typer.Option(
        None, "--kubeconfig", help="Kubeconfig file for fetched credentials"),
) -> None:
    """Select the API endpoint, set the default project, and activate credentials."""
    cfg = DeployerConfig().with_overrides(
        project=project,
        environment=environment,
        gcp_service_account=gcp_service_account,
        ignore_gcp_ssh_key=ignore_gcp_ssh_key or None,
        kubeconfig=kubeconfig,
    )
    if not cfg.project:
        raise typer.BadParameter("--project (or GKE_PROJECT) must be set", param_hint="--project")
    display_config(cfg)

    try:
        prepare_gcp(cfg)
    except DeployerError as err:
        console.print(f"[red]\u274c {err}[/red]")
        raise typer.Exit(code=1) from err
