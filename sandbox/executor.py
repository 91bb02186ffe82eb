"""
Subprocess-based sandbox runner for playground code.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
from collections.abc import Iterable
from dataclasses import dataclass, field

from sandbox import document
from sandbox import policy
from sandbox import protocol

logger = logging.getLogger(__name__)


@dataclass
class ExecutionResult:
    success: bool
    messages: list[dict[str, object]] = field(default_factory=list)
    error: str | None = None
    runtime_ms: float = 0.0
    timed_out: bool = False
    exit_code: int | None = None


def _decode(stream: str | bytes | None) -> str:
    if stream is None:
        return ""
    if isinstance(stream, bytes):
        return stream.decode("utf-8", errors="replace")
    return stream


def _last_line(text: str) -> str:
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    return lines[-1] if lines else ""


class SandboxExecutor:
    """
    Run playground JavaScript in a fresh Node.js process per run.

    The child runs the same bridge script as the browser sandbox document,
    inside a vm context holding only the allowlisted host globals. Everything
    the code posts to its parent comes back as one JSON line per message.

    On Unix platforms the CPU limit is enforced via resource.setrlimit and the
    heap via V8's --max-old-space-size. On Windows only the wall-clock timeout
    and heap cap apply.
    """

    DEFAULT_MEMORY_LIMIT_MB: int = 128
    DEFAULT_TIMEOUT_SECONDS: float = 5.0

    def __init__(
        self,
        node_binary: str = "node",
        memory_limit_mb: int | None = None,
        timeout_seconds: float | None = None,
        allowed_globals: Iterable[str] | None = None,
    ) -> None:
        self.node_binary: str = node_binary
        self.memory_limit_mb: int = memory_limit_mb or self.DEFAULT_MEMORY_LIMIT_MB
        self.timeout_seconds: float = timeout_seconds or self.DEFAULT_TIMEOUT_SECONDS
        self.globals: list[str] = policy.exposed_globals(allowed_globals)

    def execute(
        self,
        code: str,
        generation: int = 0,
        token: str = "",
        timeout_seconds: float | None = None,
    ) -> ExecutionResult:
        timeout = timeout_seconds or self.timeout_seconds
        payload = protocol.build_payload(
            bridge=document.build_bridge_script(generation, token),
            script=document.wrap_user_code(code),
            globals_=self.globals,
            generation=generation,
            token=token,
        )

        command = self._build_command()
        logger.debug(f"Starting sandbox run {generation}: {command[0]}")
        start = time.perf_counter()
        try:
            completed = subprocess.run(
                command,
                input=payload,
                text=True,
                capture_output=True,
                timeout=timeout,
                preexec_fn=policy.limit_resources(timeout) if os.name != "nt" else None,
            )
        except subprocess.TimeoutExpired as exc:
            runtime_ms = (time.perf_counter() - start) * 1000
            logger.warning(f"Sandbox run {generation} timed out after {timeout}s")
            return ExecutionResult(
                success=False,
                messages=protocol.parse_messages(_decode(exc.stdout)),
                error=f"Timeout after {timeout:g}s",
                runtime_ms=runtime_ms,
                timed_out=True,
            )
        except FileNotFoundError:
            runtime_ms = (time.perf_counter() - start) * 1000
            return ExecutionResult(
                success=False,
                error=f"JavaScript runtime not found: {self.node_binary}",
                runtime_ms=runtime_ms,
            )

        runtime_ms = (time.perf_counter() - start) * 1000
        messages = protocol.parse_messages(completed.stdout)
        if completed.returncode != 0:
            error = _last_line(completed.stderr) or f"Sandbox exited with code {completed.returncode}"
            return ExecutionResult(False, messages, error, runtime_ms, exit_code=completed.returncode)

        return ExecutionResult(True, messages, None, runtime_ms, exit_code=completed.returncode)

    def _build_command(self) -> list[str]:
        return [self.node_binary, *policy.node_flags(self.memory_limit_mb), "-e", protocol.CHILD_TEMPLATE]

