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

"""Deployer configuration, auto-loaded from GKE_* env vars, and its display."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.panel import Panel

from gke_deployer import console
from gke_deployer.constants import DEFAULT_ENVIRONMENT, DEFAULT_GCLOUD


class DeployerConfig(BaseSettings):
    """Values the preparation sequence consumes, auto-loaded from GKE_* env vars.

    Attributes:
        project: GCP project ID to configure as the wrapped tool's default.
        environment: Well-known environment name or a literal endpoint URL.
        gcp_service_account: Service account key file to activate, or empty to skip.
        ignore_gcp_ssh_key: Whether to skip the SSH key existence check.
        kubeconfig: Kubeconfig file for fetched credentials, or None for the tool default.
        gcloud: Wrapped tool binary.
    """

    model_config = SettingsConfigDict(env_prefix="GKE_", extra="ignore")

    project: str = ""
    environment: str = DEFAULT_ENVIRONMENT
    gcp_service_account: str = ""
    ignore_gcp_ssh_key: bool = False
    kubeconfig: Path | None = None
    gcloud: str = Field(default=DEFAULT_GCLOUD, min_length=1)

    def with_overrides(self, **overrides) -> DeployerConfig:
        """Apply CLI overrides, skipping any left unset (None)."""
        update = {key: value for key, value in overrides.items() if value is not None}
        return self.model_copy(update=update) if update else self


def display_config(cfg: DeployerConfig) -> None:
    """Print the resolved configuration.

    Args:
        cfg: Resolved deployer configuration.
    """
    console.print(Panel.fit("Configuration", style="bold blue"))
    console.print(f"  project             : {cfg.project or '(unset)'}")
    console.print(f"  environment         : {cfg.environment}")
    console.print(f"  gcp_service_account : {cfg.gcp_service_account or '(none)'}")
    console.print(f"  ignore_gcp_ssh_key  : {cfg.ignore_gcp_ssh_key}")
    console.print(f"  kubeconfig          : {cfg.kubeconfig or '(tool default)'}")
