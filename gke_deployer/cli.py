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

"""
cli.py - GCP preparation and cluster credentials for GKE e2e runs.

Subcommands:
    prepare           Select the API endpoint, set the project, activate credentials
    get-credentials   Write cluster credentials into the kubeconfig
    project-number    Print a project's numeric project number

Environment Variables:
    - GKE_PROJECT              (default: unset)
    - GKE_ENVIRONMENT          (default: prod)
    - GKE_GCP_SERVICE_ACCOUNT  (default: unset)
    - GKE_IGNORE_GCP_SSH_KEY   (default: false)
    - GKE_KUBECONFIG           (default: the wrapped tool's default)
    - GKE_GCLOUD               (default: gcloud)

Examples:
    # Prepare against prod
    gke-deployer prepare --project demo-proj

    # Prepare against a custom endpoint without ssh keys
    gke-deployer prepare --project demo-proj --environment https://custom.example.com/ --ignore-gcp-ssh-key

    # Fetch credentials for a regional cluster
    gke-deployer get-credentials --project demo-proj --cluster e2e --region us-central1
"""

from __future__ import annotations

import logging
import sys

import typer

from gke_deployer import console
from gke_deployer.commands import credentials_cmd, prepare_cmd

app = typer.Typer(
    help="GCP preparation and cluster credentials for GKE e2e runs.",
    no_args_is_help=True,
)


@app.callback()
def _main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Initialize logging for all subcommands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


app.command("prepare")(prepare_cmd.prepare)
app.command("get-credentials")(credentials_cmd.get_credentials)
app.command("project-number")(credentials_cmd.project_number)


def main() -> None:
    """Console script entry point."""
    try:
        app()
    except Exception as e:
        console.print(f"[red]\u274c {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
