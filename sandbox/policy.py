"""
Sandbox policy definitions: iframe capabilities, vm globals and process limits.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

# Script execution only: no same-origin, forms, popups or top navigation.
IFRAME_SANDBOX = "allow-scripts"

# Host globals copied into the child's vm context.
ALLOWED_GLOBALS = [
    "setTimeout",
    "clearTimeout",
    "setInterval",
    "clearInterval",
    "queueMicrotask",
    "structuredClone",
    "fetch",
    "Headers",
    "Request",
    "Response",
    "AbortController",
    "URL",
    "URLSearchParams",
    "TextEncoder",
    "TextDecoder",
    "atob",
    "btoa",
]

BLOCKED_GLOBALS = [
    "require",
    "process",
    "module",
    "exports",
    "Buffer",
    "global",
    "globalThis",
    "__dirname",
    "__filename",
    "setImmediate",
]


def _normalize_names(names: Iterable[str] | None) -> set[str]:
    return {name for name in (names or [])}


def exposed_globals(
    allowed_globals: Iterable[str] | None = None,
    blocked_globals: Iterable[str] | None = None,
) -> list[str]:
    """
    Resolve the list of host globals handed to the child, keeping the
    allowlist order and dropping anything explicitly blocked.
    """
    blocked = _normalize_names(blocked_globals or BLOCKED_GLOBALS)
    return [name for name in (allowed_globals or ALLOWED_GLOBALS) if name not in blocked]


def node_flags(memory_limit_mb: int) -> list[str]:
    """V8 heap cap plus a host realm that cannot compile strings.

    vm contexts keep their own eval; only the host realm loses it, so a host
    function's constructor cannot compile code that sees ``process``.
    """
    return [
        f"--max-old-space-size={int(memory_limit_mb)}",
        "--disallow-code-generation-from-strings",
        "--no-warnings",
    ]


def limit_resources(timeout_seconds: float) -> Callable[[], None]:
    """Return a preexec_fn to enforce a CPU limit on Unix.

    Address-space limits are left to V8's heap cap; node reserves far more
    virtual memory than it uses and refuses to start under RLIMIT_AS.
    """
    def _apply_limits() -> None:
        try:
            import resource
        except ImportError:
            return
        cpu_seconds = max(1, int(timeout_seconds) + 1)
        resource.setrlimit(resource.RLIMIT_CPU, (cpu_seconds, cpu_seconds + 1))

    return _apply_limits
