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

"""GCP preparation sequence: endpoint, tool context, project, credentials, SSH keys.

Steps run strictly in order and the first failure aborts the sequence. Steps
that already ran are not undone; re-running the whole sequence is safe.
"""

from __future__ import annotations

from pathlib import Path

from rich.panel import Panel

from gke_deployer import console, logger, process
from gke_deployer.config import DeployerConfig
from gke_deployer.constants import DEFAULT_GCLOUD, SSH_DIR, SSH_KEY_NAME, SSH_PUBLIC_SUFFIX
from gke_deployer.environment import configure_tool_context, home_path, resolve_endpoint
from gke_deployer.errors import (
    ProcessExecutionFailed,
    ProjectConfigFailed,
    ServiceAccountActivationFailed,
    SSHKeyMissing,
)
from gke_deployer.models import (
    Invocation,
    OutputPolicy,
    PreparedEnvironment,
    PrepareState,
    ToolContext,
)
from gke_deployer.process import Runner


# ============================================================================
# Steps
# ============================================================================

def _advance(current: PrepareState, target: PrepareState) -> PrepareState:
    logger.debug("prepare: %s -> %s", current.value, target.value)
    return target


def _run_project_config(project_id: str, context: ToolContext, runner: Runner, binary: str) -> None:
    """Persist *project_id* as the wrapped tool's default project.

    Raises:
        ProjectConfigFailed: If the wrapped tool fails.
    """
    console.print(Panel.fit(f"Configuring project {project_id}", style="bold blue"))
    invocation = Invocation.gcloud("config", "set", "project", project_id, binary=binary)
    try:
        process.raise_for_result(runner(invocation, OutputPolicy.INHERIT, context))
    except ProcessExecutionFailed as err:
        raise ProjectConfigFailed(project_id, str(err)) from err
    console.print(f"[green]\u2705 Default project set to {project_id}[/green]")


def activate_service_account(
    key_file: str,
    context: ToolContext | None = None,
    runner: Runner | None = None,
    binary: str = DEFAULT_GCLOUD,
) -> bool:
    """Activate the service account in *key_file*, or do nothing if it is empty.

    Args:
        key_file: Path to a service account JSON key, or empty string.
        context: Wrapped-tool context.
        runner: Process runner, defaults to :func:`process.run`.
        binary: Wrapped tool binary.

    Returns:
        True if a service account was activated, False if the step was skipped.

    Raises:
        ServiceAccountActivationFailed: If the wrapped tool fails.
    """
    if not key_file:
        return False
    runner = runner or process.run
    invocation = Invocation.gcloud("auth", "activate-service-account", f"--key-file={key_file}", binary=binary)
    try:
        process.raise_for_result(runner(invocation, OutputPolicy.INHERIT, context))
    except ProcessExecutionFailed as err:
        raise ServiceAccountActivationFailed(key_file, str(err)) from err
    return True


def verify_ssh_keys(home: Path | None = None) -> None:
    """Check that the GCE SSH private key and its public key exist.

    Args:
        home: Home directory override, or None for the invoking user's home.

    Raises:
        SSHKeyMissing: Naming the first missing key file.
    """
    logger.debug("Checking existence of GCP ssh keys...")
    private_key = home_path(SSH_DIR, SSH_KEY_NAME, home=home)
    public_key = private_key.with_name(private_key.name + SSH_PUBLIC_SUFFIX)
    for key in (private_key, public_key):
        if not key.exists():
            raise SSHKeyMissing(str(key))


# ============================================================================
# Public API
# ============================================================================

def prepare_gcp(
    cfg: DeployerConfig,
    *,
    runner: Runner | None = None,
    home: Path | None = None,
) -> PreparedEnvironment:
    """Prepare the wrapped tool for an e2e run against *cfg.environment*.

    Resolves the endpoint, builds the tool context, sets the default project,
    activates the service account if one is configured, and verifies SSH keys
    unless they are ignored.

    Args:
        cfg: Resolved deployer configuration.
        runner: Process runner, defaults to :func:`process.run`.
        home: Home directory override for the SSH key check.

    Returns:
        The selected endpoint and the tool context to use for later invocations.

    Raises:
        DeployerError: The first failing step's error; its ``failed_step``
            names the state that was not reached.
    """
    runner = runner or process.run
    state = PrepareState.NOT_STARTED

    endpoint = resolve_endpoint(cfg.environment)
    state = _advance(state, PrepareState.ENDPOINT_RESOLVED)
    console.print(f"[yellow]\u2139\ufe0f  Using container endpoint {endpoint}[/yellow]")

    context = configure_tool_context(endpoint, cfg.kubeconfig)
    state = _advance(state, PrepareState.ENVIRONMENT_CONFIGURED)

    _run_project_config(cfg.project, context, runner, cfg.gcloud)
    state = _advance(state, PrepareState.PROJECT_CONFIGURED)

    # gcloud creds may have changed
    if activate_service_account(cfg.gcp_service_account, context, runner, cfg.gcloud):
        console.print(f"[green]\u2705 Activated service account {cfg.gcp_service_account}[/green]")
    state = _advance(state, PrepareState.CREDENTIALS_ACTIVATED)

    if cfg.ignore_gcp_ssh_key:
        console.print("[yellow]   Skipping GCP ssh key check[/yellow]")
    else:
        verify_ssh_keys(home)
    state = _advance(state, PrepareState.KEYS_VERIFIED)

    state = _advance(state, PrepareState.DONE)
    console.print("[green]\u2705 GCP preparation complete[/green]")
    return PreparedEnvironment(endpoint=endpoint, context=context, state=state)
