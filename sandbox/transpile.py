"""TypeScript to JavaScript transpile adapter."""

from __future__ import annotations

import json
import logging
import os
import subprocess
from dataclasses import dataclass, field

from sandbox import protocol

logger = logging.getLogger(__name__)


class TranspileError(RuntimeError):
    """The transpiler itself could not run (missing runtime, crash, bad reply)."""


@dataclass
class TranspileResult:
    code: str
    diagnostics: list[str] = field(default_factory=list)


class TypeScriptTranspiler:
    """
    Single-file, no-type-check transpilation through the TypeScript compiler's
    ``transpileModule`` running in a Node.js child process.

    Syntax diagnostics never block: whatever the compiler emits, degraded or
    not, is handed on for execution and the diagnostics ride along.
    """

    DEFAULT_TIMEOUT_SECONDS: float = 15.0

    def __init__(
        self,
        node_binary: str = "node",
        node_path: str | None = None,
        target: str = "ES2020",
        module: str = "ESNext",
        timeout_seconds: float | None = None,
    ) -> None:
        self.node_binary = node_binary
        self.node_path = node_path
        self.target = target
        self.module = module
        self.timeout_seconds = timeout_seconds or self.DEFAULT_TIMEOUT_SECONDS

    def transpile(self, code: str, language: str) -> TranspileResult:
        if language == "javascript":
            return TranspileResult(code=code)
        if language != "typescript":
            raise ValueError(f"Unsupported language: {language}")

        payload = json.dumps({"code": code, "target": self.target, "module": self.module})
        try:
            completed = subprocess.run(
                self._build_command(),
                input=payload,
                text=True,
                capture_output=True,
                timeout=self.timeout_seconds,
                env=self._build_env(),
            )
        except FileNotFoundError as exc:
            raise TranspileError(f"JavaScript runtime not found: {self.node_binary}") from exc
        except subprocess.TimeoutExpired as exc:
            raise TranspileError(f"Transpiler timed out after {self.timeout_seconds:g}s") from exc

        if completed.returncode != 0:
            detail = completed.stderr.strip() or f"exit code {completed.returncode}"
            if "Cannot find module 'typescript'" in detail:
                detail = "the 'typescript' package is not installed (set node_path to its node_modules)"
            raise TranspileError(f"TypeScript transpiler failed: {detail}")

        try:
            output, diagnostics = protocol.parse_transpile_output(completed.stdout)
        except ValueError as exc:
            # json.JSONDecodeError is a ValueError too
            raise TranspileError(f"Invalid response from transpiler: {exc}") from exc

        for diagnostic in diagnostics:
            logger.warning(f"TypeScript diagnostic: {diagnostic}")
        return TranspileResult(code=output, diagnostics=diagnostics)

    def _build_command(self) -> list[str]:
        return [self.node_binary, "-e", protocol.TRANSPILE_TEMPLATE]

    def _build_env(self) -> dict[str, str]:
        env = os.environ.copy()
        if self.node_path:
            existing = env.get("NODE_PATH", "")
            env["NODE_PATH"] = f"{self.node_path}{os.pathsep}{existing}" if existing else self.node_path
        return env


def transpile(code: str, language: str, transpiler: TypeScriptTranspiler | None = None) -> TranspileResult:
    """Turn playground source into executable JavaScript; JavaScript passes through untouched."""
    return (transpiler or TypeScriptTranspiler()).transpile(code, language)
