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

"""Error taxonomy for GCP preparation and credential retrieval."""

from __future__ import annotations

from gke_deployer.models import PrepareState, ProcessFailure


class DeployerError(RuntimeError):
    """Base class for all deployer failures.

    Attributes:
        failed_step: Preparation state that could not be reached, or None when
            the failure happened outside the preparation sequence.
    """

    failed_step: PrepareState | None = None


class ProcessExecutionFailed(DeployerError):
    """A child process failed to start or exited nonzero."""

    def __init__(self, failure: ProcessFailure, message: str) -> None:
        super().__init__(message)
        self.failure = failure


class InvalidEnvironment(DeployerError):
    """Environment is neither a well-known name nor an endpoint URL."""

    failed_step = PrepareState.ENDPOINT_RESOLVED

    def __init__(self, value: str, accepted: list[str], pattern: str) -> None:
        super().__init__(
            f"--environment must be one of {{{','.join(accepted)}}} or match {pattern}, found {value!r}"
        )
        self.value = value


class EnvironmentSetupFailed(DeployerError):
    """A wrapped-tool context variable could not be set."""

    failed_step = PrepareState.ENVIRONMENT_CONFIGURED

    def __init__(self, name: str, value: str, reason: str) -> None:
        super().__init__(f"could not set {name}={value!r}: {reason}")
        self.name = name


class ProjectConfigFailed(DeployerError):
    """Persisting the default project failed."""

    failed_step = PrepareState.PROJECT_CONFIGURED

    def __init__(self, project_id: str, cause: str) -> None:
        super().__init__(f"failed to set project {project_id}: {cause}")
        self.project_id = project_id


class ServiceAccountActivationFailed(DeployerError):
    """Activating the service account key file failed."""

    failed_step = PrepareState.CREDENTIALS_ACTIVATED

    def __init__(self, key_file: str, cause: str) -> None:
        super().__init__(f"failed to activate service account {key_file}: {cause}")
        self.key_file = key_file


class SSHKeyMissing(DeployerError):
    """Required SSH key material is missing."""

    failed_step = PrepareState.KEYS_VERIFIED

    def __init__(self, path: str) -> None:
        super().__init__(f"ssh key {path} does not exist")
        self.path = path


class GetCredentialsFailed(DeployerError):
    """Fetching cluster credentials failed."""

    def __init__(self, cluster: str, cause: str) -> None:
        super().__init__(f"error executing get-credentials for cluster {cluster}: {cause}")
        self.cluster = cluster


class ProjectNumberLookupFailed(DeployerError):
    """Looking up a project's number failed."""

    def __init__(self, project_id: str, cause: str) -> None:
        super().__init__(f"failed to get project number for {project_id}: {cause}")
        self.project_id = project_id
