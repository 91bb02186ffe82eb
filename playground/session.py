"""
Playground controller: run, reset, load and copy, wired to one shared store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sandbox import document
from sandbox.bridge import MessageBridge
from sandbox.executor import SandboxExecutor
from sandbox.transpile import TranspileError, TypeScriptTranspiler

from .examples import get_example
from .schemas import Example, Language
from .state import PlaygroundStore

if TYPE_CHECKING:
    from workbench.config import PlaygroundConfig

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    generation: int
    language: Language
    output: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    diagnostics: list[str] = field(default_factory=list)
    timed_out: bool = False
    runtime_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return not self.errors


class PlaygroundSession:
    """One playground view: reads the shared store and runs its code.

    Output and errors always belong to the latest run; ``run`` clears both
    before the sandbox can deliver anything.
    """

    def __init__(
        self,
        store: PlaygroundStore | None = None,
        transpiler: TypeScriptTranspiler | None = None,
        executor: SandboxExecutor | None = None,
        bridge: MessageBridge | None = None,
    ) -> None:
        self.store = store or PlaygroundStore()
        self.transpiler = transpiler or TypeScriptTranspiler()
        self.executor = executor or SandboxExecutor()
        self.bridge = bridge or MessageBridge()

    @classmethod
    def from_config(cls, config: PlaygroundConfig, store: PlaygroundStore | None = None) -> PlaygroundSession:
        transpiler = TypeScriptTranspiler(
            node_binary=config.node_binary,
            node_path=config.node_path,
            target=config.ts_target,
            module=config.ts_module,
            timeout_seconds=config.transpile_timeout_s,
        )
        executor = SandboxExecutor(
            node_binary=config.node_binary,
            memory_limit_mb=config.memory_limit_mb,
            timeout_seconds=config.execution_timeout_s,
            allowed_globals=config.allowed_globals,
        )
        return cls(store or PlaygroundStore(config.default_code), transpiler, executor)

    @property
    def output(self) -> list[str]:
        return self.bridge.output

    @property
    def errors(self) -> list[str]:
        return self.bridge.errors

    def run(self) -> RunResult:
        state = self.store.state
        generation, token = self.bridge.begin_run()
        result = RunResult(generation=generation, language=state.language)

        try:
            compiled = self.transpiler.transpile(state.code, state.language)
        except TranspileError as exc:
            logger.error(f"Run {generation}: {exc}")
            self.bridge.report_error(f"Transpile error: {exc}")
            result.output, result.errors = self.bridge.snapshot()
            return result
        result.diagnostics = list(compiled.diagnostics)

        execution = self.executor.execute(compiled.code, generation=generation, token=token)
        for message in execution.messages:
            self.bridge.receive(message)
        if execution.error:
            self.bridge.report_error(execution.error)

        result.output, result.errors = self.bridge.snapshot()
        result.timed_out = execution.timed_out
        result.runtime_ms = execution.runtime_ms
        logger.info(
            f"Run {generation} ({state.language}) finished: "
            f"{len(result.output)} output line(s), {len(result.errors)} error line(s)"
        )
        return result

    def reset(self) -> None:
        self.store.reset()

    def load_example(self, title: str) -> Example:
        example = get_example(title)
        self.store.load(example.code, example.language)
        return example

    def load_snippet(self, code: str) -> None:
        self.store.load(code, "javascript")

    def copy_code(self) -> str:
        return self.store.code

    def render_document(self) -> str:
        """Sandbox document for the current code, tagged with a fresh run."""
        state = self.store.state
        generation, token = self.bridge.begin_run()
        compiled = self.transpiler.transpile(state.code, state.language)
        return document.build_sandbox_document(compiled.code, generation, token)

    def render_iframe(self) -> str:
        return document.build_iframe(self.render_document())
