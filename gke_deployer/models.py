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

"""Invocation, output policy, result, and preparation state models."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from gke_deployer.constants import CONTAINER_GROUP, DEFAULT_GCLOUD


# ============================================================================
# Process invocation
# ============================================================================

class OutputPolicy(Enum):
    """How a child's standard streams are handled."""

    DISCARD = "discard"
    INHERIT = "inherit"
    CAPTURE_AND_FORWARD = "capture-and-forward"


@dataclass(frozen=True)
class Invocation:
    """A command name plus its ordered arguments.

    Attributes:
        command: Executable name or path.
        args: Arguments passed verbatim, in order, without shell parsing.
    """

    command: str
    args: tuple[str, ...] = ()

    @classmethod
    def gcloud(cls, *args: str, binary: str = DEFAULT_GCLOUD) -> Invocation:
        """Build a wrapped-tool invocation."""
        return cls(binary, tuple(args))

    @classmethod
    def container(cls, *args: str, binary: str = DEFAULT_GCLOUD) -> Invocation:
        """Build a wrapped-tool invocation under the ``container`` group."""
        return cls(binary, (CONTAINER_GROUP, *args))

    @property
    def argv(self) -> list[str]:
        """Return the full argument vector, command first."""
        return [self.command, *self.args]

    def __str__(self) -> str:
        return " ".join(self.argv)


@dataclass(frozen=True)
class ToolContext:
    """Runtime context for the wrapped tool, applied per child process.

    Attributes:
        env: Variables layered over the parent environment for each child.
    """

    env: Mapping[str, str] = field(default_factory=dict)

    def child_env(self) -> dict[str, str]:
        """Return the parent environment with this context's variables applied."""
        return {**os.environ, **self.env}


# ============================================================================
# Invocation results
# ============================================================================

class FailureKind(Enum):
    """Why an invocation failed."""

    START_FAILED = "start-failed"
    EXITED_NONZERO = "exited-nonzero"


@dataclass(frozen=True)
class ProcessFailure:
    """Structured failure detail for an invocation.

    Attributes:
        kind: Whether the child never started or ran and exited nonzero.
        description: Default textual description of the failure.
        exit_code: Exit status of the child, or None if it never started.
        stderr: Raw standard error bytes of the child, or None if none was recorded.
    """

    kind: FailureKind
    description: str
    exit_code: int | None = None
    stderr: bytes | None = None


@dataclass(frozen=True)
class InvocationResult:
    """Outcome of a single invocation.

    Attributes:
        ok: Whether the child exited with status zero.
        output: Raw interleaved stdout/stderr bytes (CaptureAndForward only).
        failure: Failure detail when ``ok`` is False.
    """

    ok: bool
    output: bytes | None = None
    failure: ProcessFailure | None = None


# ============================================================================
# Preparation
# ============================================================================

class PrepareState(Enum):
    """Progress of the preparation sequence."""

    NOT_STARTED = "NotStarted"
    ENDPOINT_RESOLVED = "EndpointResolved"
    ENVIRONMENT_CONFIGURED = "EnvironmentConfigured"
    PROJECT_CONFIGURED = "ProjectConfigured"
    CREDENTIALS_ACTIVATED = "CredentialsActivated"
    KEYS_VERIFIED = "KeysVerified"
    DONE = "Done"


@dataclass(frozen=True)
class PreparedEnvironment:
    """Result of a successful preparation run.

    Attributes:
        endpoint: Container API endpoint selected for the environment.
        context: Wrapped-tool context to use for later invocations.
        state: Final state reached, always ``PrepareState.DONE``.
    """

    endpoint: str
    context: ToolContext
    state: PrepareState = PrepareState.DONE
