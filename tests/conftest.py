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

"""Shared fixtures for gke_deployer tests."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from gke_deployer.models import (
    FailureKind,
    Invocation,
    InvocationResult,
    OutputPolicy,
    ProcessFailure,
    ToolContext,
)


@dataclass
class RecordedCall:
    """One invocation seen by the fake runner."""

    invocation: Invocation
    policy: OutputPolicy
    context: ToolContext | None


@dataclass
class FakeRunner:
    """Process runner double that records calls and fails on request.

    Attributes:
        calls: Invocations in the order they were issued.
        fail_when: Predicate on an invocation; matching calls exit nonzero.
        stderr: Recorded stderr bytes attached to simulated failures.
    """

    calls: list[RecordedCall] = field(default_factory=list)
    fail_when: Callable[[Invocation], bool] = lambda _: False
    stderr: bytes | None = None

    def __call__(
        self,
        invocation: Invocation,
        policy: OutputPolicy,
        context: ToolContext | None = None,
    ) -> InvocationResult:
        self.calls.append(RecordedCall(invocation, policy, context))
        if self.fail_when(invocation):
            failure = ProcessFailure(
                kind=FailureKind.EXITED_NONZERO,
                description=f"{invocation} exited with status 1",
                exit_code=1,
                stderr=self.stderr,
            )
            return InvocationResult(ok=False, failure=failure)
        return InvocationResult(ok=True)

    @property
    def argvs(self) -> list[list[str]]:
        return [call.invocation.argv for call in self.calls]


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Fake runner where every invocation succeeds."""
    return FakeRunner()


@pytest.fixture
def home_with_keys(tmp_path: Path) -> Path:
    """Home directory containing both GCE ssh key files."""
    ssh_dir = tmp_path / ".ssh"
    ssh_dir.mkdir()
    (ssh_dir / "google_compute_engine").write_text("private")
    (ssh_dir / "google_compute_engine.pub").write_text("public")
    return tmp_path


@pytest.fixture(autouse=True)
def _clear_gke_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep GKE_* variables from the outer environment out of settings."""
    for name in ("PROJECT", "ENVIRONMENT", "GCP_SERVICE_ACCOUNT", "IGNORE_GCP_SSH_KEY", "KUBECONFIG", "GCLOUD"):
        monkeypatch.delenv(f"GKE_{name}", raising=False)
