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

"""Unit tests for the process runner and failure classification.

The running interpreter stands in for the wrapped tool so that real child
processes are exercised.
"""

from __future__ import annotations

import io
import sys
import textwrap

import pytest

from gke_deployer.errors import ProcessExecutionFailed
from gke_deployer.models import (
    FailureKind,
    Invocation,
    InvocationResult,
    OutputPolicy,
    ProcessFailure,
    ToolContext,
)
from gke_deployer.process import describe_failure, output, raise_for_result, run


def _python(script: str) -> Invocation:
    return Invocation(sys.executable, ("-c", textwrap.dedent(script)))


INTERLEAVED = _python(
    """
    import sys, time
    sys.stdout.write("one\\n"); sys.stdout.flush(); time.sleep(0.2)
    sys.stderr.write("two\\n"); sys.stderr.flush(); time.sleep(0.2)
    sys.stdout.write("three\\n"); sys.stdout.flush()
    """
)

FAILING = _python(
    """
    import sys
    sys.stdout.write("partial\\n"); sys.stdout.flush()
    sys.stderr.write("permission denied"); sys.stderr.flush()
    sys.exit(3)
    """
)


RAW_OUT = b"ok \xff\xfe end\n"
RAW_ERR = b"bad \xc3\x28\n"

RAW_BYTES = _python(
    f"""
    import sys, time
    sys.stdout.buffer.write({RAW_OUT!r}); sys.stdout.flush(); time.sleep(0.2)
    sys.stderr.buffer.write({RAW_ERR!r}); sys.stderr.flush()
    sys.exit(1)
    """
)

# The two-byte character straddles the first 4096-byte read.
SPLIT_PAYLOAD = b"a" * 4095 + "é".encode() + b"\n"

SPLIT_CHAR = _python(
    f"""
    import sys
    sys.stdout.buffer.write({SPLIT_PAYLOAD!r}); sys.stdout.flush()
    """
)

MISSING = Invocation("gke-deployer-test-no-such-binary", ("--version",))


class TestRunCaptureAndForward:
    """Tests for the CAPTURE_AND_FORWARD policy."""

    def test_buffer_holds_both_streams_in_write_order(self, capfd: pytest.CaptureFixture[str]) -> None:
        """Should record stdout and stderr interleaved as written."""
        result = run(INTERLEAVED, OutputPolicy.CAPTURE_AND_FORWARD)

        assert result.ok
        assert result.output == b"one\ntwo\nthree\n"
        assert result.failure is None

    def test_forwards_to_parent_streams(self, capfd: pytest.CaptureFixture[str]) -> None:
        """Should also show the child's output on our stdout and stderr."""
        run(INTERLEAVED, OutputPolicy.CAPTURE_AND_FORWARD)

        captured = capfd.readouterr()
        assert captured.out == "one\nthree\n"
        assert captured.err == "two\n"

    def test_returns_buffer_on_failure(self, capfd: pytest.CaptureFixture[str]) -> None:
        """Should return captured output and stderr when the child fails."""
        result = run(FAILING, OutputPolicy.CAPTURE_AND_FORWARD)

        assert not result.ok
        assert b"partial\n" in result.output
        assert b"permission denied" in result.output
        assert result.failure.kind is FailureKind.EXITED_NONZERO
        assert result.failure.exit_code == 3
        assert result.failure.stderr == b"permission denied"

    def test_invalid_utf8_round_trips_exactly(self, capfdbinary: pytest.CaptureFixture[bytes]) -> None:
        """Should record and forward bytes that are not valid UTF-8 unchanged."""
        result = run(RAW_BYTES, OutputPolicy.CAPTURE_AND_FORWARD)

        captured = capfdbinary.readouterr()
        assert result.output == RAW_OUT + RAW_ERR
        assert result.failure.stderr == RAW_ERR
        assert captured.out == RAW_OUT
        assert captured.err == RAW_ERR

    def test_multibyte_split_across_reads(self, capfdbinary: pytest.CaptureFixture[bytes]) -> None:
        """Should keep a character split across read boundaries intact."""
        result = run(SPLIT_CHAR, OutputPolicy.CAPTURE_AND_FORWARD)

        assert result.ok
        assert result.output == SPLIT_PAYLOAD
        assert capfdbinary.readouterr().out == SPLIT_PAYLOAD

    def test_text_only_stream_gets_decoded_output(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should decode incrementally for a parent stream without a byte buffer."""
        text_stdout = io.StringIO()
        monkeypatch.setattr(sys, "stdout", text_stdout)

        result = run(SPLIT_CHAR, OutputPolicy.CAPTURE_AND_FORWARD)

        assert result.output == SPLIT_PAYLOAD
        assert text_stdout.getvalue() == SPLIT_PAYLOAD.decode()


class TestRunDiscard:
    """Tests for the DISCARD policy."""

    def test_produces_no_visible_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        """Should throw away everything the child writes."""
        noisy = _python(
            """
            import sys
            for i in range(2000):
                print("line", i)
                print("err", i, file=sys.stderr)
            """
        )

        result = run(noisy, OutputPolicy.DISCARD)

        captured = capfd.readouterr()
        assert result == InvocationResult(ok=True)
        assert captured.out == ""
        assert captured.err == ""

    def test_reports_failure_without_stderr(self, capfd: pytest.CaptureFixture[str]) -> None:
        """Should report a nonzero exit with no recorded stderr."""
        result = run(FAILING, OutputPolicy.DISCARD)

        assert not result.ok
        assert result.output is None
        assert result.failure.exit_code == 3
        assert result.failure.stderr is None
        assert capfd.readouterr().err == ""


class TestRunInherit:
    """Tests for the INHERIT policy."""

    def test_child_writes_to_parent_streams(self, capfd: pytest.CaptureFixture[str]) -> None:
        """Should let the child write directly to our stdout and stderr."""
        result = run(INTERLEAVED, OutputPolicy.INHERIT)

        captured = capfd.readouterr()
        assert result == InvocationResult(ok=True)
        assert captured.out == "one\nthree\n"
        assert captured.err == "two\n"

    def test_nonzero_exit_is_failure(self, capfd: pytest.CaptureFixture[str]) -> None:
        """Should report the exit status of a failing child."""
        result = run(FAILING, OutputPolicy.INHERIT)

        assert not result.ok
        assert result.failure.kind is FailureKind.EXITED_NONZERO
        assert result.failure.exit_code == 3
        assert "exited with status 3" in result.failure.description

    def test_context_variables_reach_child(self, capfd: pytest.CaptureFixture[str]) -> None:
        """Should layer the tool context over the parent environment."""
        context = ToolContext(env={"CLOUDSDK_API_ENDPOINT_OVERRIDES_CONTAINER": "https://custom.example.com/"})
        echo = _python(
            """
            import os
            print(os.environ["CLOUDSDK_API_ENDPOINT_OVERRIDES_CONTAINER"])
            print("PATH" in os.environ)
            """
        )

        result = run(echo, OutputPolicy.INHERIT, context)

        assert result.ok
        assert capfd.readouterr().out == "https://custom.example.com/\nTrue\n"


@pytest.mark.parametrize("policy", list(OutputPolicy))
def test_missing_binary_is_start_failure(policy: OutputPolicy) -> None:
    """Should report a binary that cannot be started as a start failure."""
    result = run(MISSING, policy)

    assert not result.ok
    assert result.output is None
    assert result.failure.kind is FailureKind.START_FAILED
    assert result.failure.exit_code is None
    assert result.failure.stderr is None
    assert "gke-deployer-test-no-such-binary" in result.failure.description


class TestDescribeFailure:
    """Tests for describe_failure."""

    def test_appends_recorded_stderr(self) -> None:
        """Should put recorded stderr in parentheses after the description."""
        failure = ProcessFailure(FailureKind.EXITED_NONZERO, "gcloud exited with status 1", 1, b"permission denied")

        assert describe_failure(failure) == "gcloud exited with status 1 (output: 'permission denied')"

    def test_description_only_without_stderr(self) -> None:
        """Should return the bare description when no stderr was recorded."""
        failure = ProcessFailure(FailureKind.EXITED_NONZERO, "gcloud exited with status 1", 1)

        assert describe_failure(failure) == "gcloud exited with status 1"

    def test_start_failure_is_description_only(self) -> None:
        """Should never attach stderr to a start failure."""
        failure = ProcessFailure(FailureKind.START_FAILED, "failed to start 'gcloud'", stderr=b"ignored")

        assert describe_failure(failure) == "failed to start 'gcloud'"

    def test_real_failure_includes_stderr(self, capfd: pytest.CaptureFixture[str]) -> None:
        """Should classify a failing child's stderr into the message."""
        result = run(FAILING, OutputPolicy.CAPTURE_AND_FORWARD)

        message = describe_failure(result.failure)

        assert "permission denied" in message
        assert message.startswith(result.failure.description)


class TestRaiseForResult:
    """Tests for raise_for_result."""

    def test_passes_success_through(self) -> None:
        """Should return a successful result unchanged."""
        result = InvocationResult(ok=True, output="done")

        assert raise_for_result(result) is result

    def test_raises_with_classified_message(self) -> None:
        """Should raise ProcessExecutionFailed carrying the failure."""
        failure = ProcessFailure(FailureKind.EXITED_NONZERO, "gcloud exited with status 2", 2, b"boom")

        with pytest.raises(ProcessExecutionFailed, match="status 2 \\(output: 'boom'\\)") as exc_info:
            raise_for_result(InvocationResult(ok=False, failure=failure))

        assert exc_info.value.failure is failure
        assert exc_info.value.failed_step is None


class TestOutput:
    """Tests for output."""

    def test_returns_stdout_only(self) -> None:
        """Should return stdout and keep stderr off the result."""
        assert output(INTERLEAVED) == "one\nthree\n"

    def test_failure_carries_stderr(self) -> None:
        """Should attach the child's stderr to the failure."""
        with pytest.raises(ProcessExecutionFailed) as exc_info:
            output(FAILING)

        assert exc_info.value.failure.stderr == b"permission denied"
        assert "permission denied" in str(exc_info.value)

    def test_missing_binary(self) -> None:
        """Should raise a start failure for a missing binary."""
        with pytest.raises(ProcessExecutionFailed) as exc_info:
            output(MISSING)

        assert exc_info.value.failure.kind is FailureKind.START_FAILED
