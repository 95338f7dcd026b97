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

"""Process runner with discard, inherit, and capture-and-forward output policies.

Every invocation blocks until the child exits. Failures are returned as
:class:`ProcessFailure` values rather than raised, so callers decide how to
wrap them; :func:`raise_for_result` converts a failed result into a
:class:`ProcessExecutionFailed`.

Uses subprocess because capture-and-forward needs precise control over the
child's stdout/stderr pipes to tee them in arrival order.
"""

from __future__ import annotations

import codecs
import os
import selectors
import subprocess
import sys
from collections.abc import Callable
from typing import TextIO

from gke_deployer import logger
from gke_deployer.errors import ProcessExecutionFailed
from gke_deployer.models import (
    FailureKind,
    Invocation,
    InvocationResult,
    OutputPolicy,
    ProcessFailure,
    ToolContext,
)

Runner = Callable[[Invocation, OutputPolicy, ToolContext | None], InvocationResult]

_READ_SIZE = 4096


# ============================================================================
# Failure construction and classification
# ============================================================================

def _start_failure(invocation: Invocation, exc: OSError) -> ProcessFailure:
    """Build failure detail for a child that could not be started."""
    return ProcessFailure(
        kind=FailureKind.START_FAILED,
        description=f"failed to start {invocation.command!r}: {exc}",
    )


def _exit_failure(invocation: Invocation, returncode: int, stderr: bytes | None) -> ProcessFailure:
    """Build failure detail for a child that ran and exited nonzero.

    Args:
        invocation: The invocation that failed.
        returncode: Exit status, negative when the child was killed by a signal.
        stderr: Recorded standard error bytes, or None if they went elsewhere.
    """
    if returncode < 0:
        description = f"{invocation} was terminated by signal {-returncode}"
    else:
        description = f"{invocation} exited with status {returncode}"
    return ProcessFailure(
        kind=FailureKind.EXITED_NONZERO,
        description=description,
        exit_code=returncode,
        stderr=stderr,
    )


def describe_failure(failure: ProcessFailure) -> str:
    """Format a failure for logs and end-user display.

    Recorded standard error is appended in parentheses when the child ran and
    left some; otherwise only the default description is returned.

    Args:
        failure: Failure detail from an invocation result.

    Returns:
        Human-readable failure description.
    """
    if failure.kind is FailureKind.EXITED_NONZERO and failure.stderr is not None:
        return f"{failure.description} (output: {failure.stderr.decode(errors='replace')!r})"
    return failure.description


def raise_for_result(result: InvocationResult) -> InvocationResult:
    """Return *result* unchanged if it succeeded.

    Raises:
        ProcessExecutionFailed: If the invocation failed.
    """
    if result.ok:
        return result
    failure = result.failure or ProcessFailure(FailureKind.EXITED_NONZERO, "command failed")
    raise ProcessExecutionFailed(failure, describe_failure(failure))


# ============================================================================
# Runner
# ============================================================================

def _forwarder(stream: TextIO) -> Callable[[bytes, bool], None]:
    """Build a writer that passes raw chunks to *stream*.

    Streams without a byte buffer get text decoded incrementally instead.
    """
    raw = getattr(stream, "buffer", None)
    if raw is not None:
        def _write_raw(chunk: bytes, final: bool) -> None:
            if chunk:
                stream.flush()
                raw.write(chunk)
                raw.flush()
        return _write_raw

    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def _write_text(chunk: bytes, final: bool) -> None:
        text = decoder.decode(chunk, final=final)
        if text:
            stream.write(text)
            stream.flush()
    return _write_text


def _tee_streams(proc: subprocess.Popen) -> tuple[bytes, bytes]:
    """Forward the child's stdout/stderr to ours while recording them.

    Chunks are handled byte-for-byte in the order they are read from either
    pipe.

    Returns:
        Tuple of (interleaved output, stderr alone).
    """
    captured = bytearray()
    captured_err = bytearray()
    targets: dict[int, tuple[Callable[[bytes, bool], None], tuple[bytearray, ...]]] = {
        proc.stdout.fileno(): (_forwarder(sys.stdout), (captured,)),
        proc.stderr.fileno(): (_forwarder(sys.stderr), (captured, captured_err)),
    }

    with selectors.DefaultSelector() as selector:
        for fd in targets:
            selector.register(fd, selectors.EVENT_READ)
        while selector.get_map():
            for key, _ in selector.select():
                chunk = os.read(key.fd, _READ_SIZE)
                forward, buffers = targets[key.fd]
                forward(chunk, not chunk)
                for buf in buffers:
                    buf.extend(chunk)
                if not chunk:
                    selector.unregister(key.fd)
    return bytes(captured), bytes(captured_err)


def run(
    invocation: Invocation,
    policy: OutputPolicy = OutputPolicy.INHERIT,
    context: ToolContext | None = None,
) -> InvocationResult:
    """Run *invocation* under *policy* and block until it exits.

    Args:
        invocation: Command and ordered arguments.
        policy: How the child's stdout/stderr are handled.
        context: Wrapped-tool context layered over the parent environment.

    Returns:
        Invocation result. ``output`` holds the interleaved stdout/stderr for
        CAPTURE_AND_FORWARD, whether or not the child succeeded.
    """
    context = context or ToolContext()
    env = context.child_env()
    logger.debug("Running (%s): %s", policy.value, invocation)

    if policy is OutputPolicy.CAPTURE_AND_FORWARD:
        try:
            proc = subprocess.Popen(invocation.argv, stdout=subprocess.PIPE, stderr=subprocess.PIPE, env=env)
        except OSError as exc:
            return InvocationResult(ok=False, failure=_start_failure(invocation, exc))
        with proc:
            output, stderr = _tee_streams(proc)
        if proc.returncode != 0:
            return InvocationResult(ok=False, output=output,
                                    failure=_exit_failure(invocation, proc.returncode, stderr))
        return InvocationResult(ok=True, output=output)

    streams: dict = {}
    if policy is OutputPolicy.DISCARD:
        streams = {"stdout": subprocess.DEVNULL, "stderr": subprocess.DEVNULL}
    try:
        completed = subprocess.run(invocation.argv, env=env, **streams)
    except OSError as exc:
        return InvocationResult(ok=False, failure=_start_failure(invocation, exc))
    if completed.returncode != 0:
        return InvocationResult(ok=False, failure=_exit_failure(invocation, completed.returncode, None))
    return InvocationResult(ok=True)


def output(invocation: Invocation, context: ToolContext | None = None) -> str:
    """Run *invocation* and return its standard output.

    Standard error is recorded and attached to the failure if the child exits
    nonzero.

    Args:
        invocation: Command and ordered arguments.
        context: Wrapped-tool context layered over the parent environment.

    Returns:
        Decoded standard output.

    Raises:
        ProcessExecutionFailed: If the child fails to start or exits nonzero.
    """
    context = context or ToolContext()
    logger.debug("Running (output): %s", invocation)
    try:
        completed = subprocess.run(
            invocation.argv,
            capture_output=True,
            env=context.child_env(),
        )
    except OSError as exc:
        failure = _start_failure(invocation, exc)
        raise ProcessExecutionFailed(failure, describe_failure(failure)) from exc
    if completed.returncode != 0:
        failure = _exit_failure(invocation, completed.returncode, completed.stderr)
        raise ProcessExecutionFailed(failure, describe_failure(failure))
    return completed.stdout.decode(errors="replace")
