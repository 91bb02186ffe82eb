"""Shared fixtures: tests needing a real Node.js (and typescript) skip without one."""

from __future__ import annotations

import shutil
import subprocess
import sys

import pytest

from sandbox.transpile import TypeScriptTranspiler

NODE = shutil.which("node")

# Stands in for the TypeScript compiler: drops single-line type/interface
# declarations and simple `const x: T` annotations.
TYPE_ERASING_CHILD = r'''
import json
import re
import sys

payload = json.loads(sys.stdin.read())
code = re.sub(r"^[ \t]*(?:type|interface)\s+\w+[^\n]*\n?", "", payload["code"], flags=re.M)
code = re.sub(r"\b((?:const|let|var)\s+\w+)\s*:\s*[\w\[\]<>]+", r"\1", code)
print(json.dumps({"outputText": code, "diagnostics": []}))
'''


def _typescript_available() -> bool:
    if NODE is None:
        return False
    try:
        completed = subprocess.run(
            [NODE, "-e", "require('typescript')"],
            capture_output=True,
            timeout=30,
        )
    except (OSError, subprocess.TimeoutExpired):
        return False
    return completed.returncode == 0


@pytest.fixture(scope="session")
def node_binary() -> str:
    if NODE is None:
        pytest.skip("Node.js is not installed")
    return NODE


@pytest.fixture(scope="session")
def typescript_node(node_binary: str) -> str:
    if not _typescript_available():
        pytest.skip("The 'typescript' package is not resolvable from node")
    return node_binary


@pytest.fixture
def erasing_transpiler(monkeypatch: pytest.MonkeyPatch) -> TypeScriptTranspiler:
    transpiler = TypeScriptTranspiler()
    monkeypatch.setattr(transpiler, "_build_command", lambda: [sys.executable, "-c", TYPE_ERASING_CHILD])
    return transpiler
