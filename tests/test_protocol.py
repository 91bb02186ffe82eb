"""Tests for the child process protocol helpers."""

from __future__ import annotations

import json
import logging

import pytest

from sandbox import policy
from sandbox.protocol import build_payload, parse_messages, parse_transpile_output


def test_parse_messages_keeps_arrival_order():
    stdout = "\n".join(
        json.dumps({"type": t, "payload": p, "generation": 1, "token": "t"})
        for t, p in [("log", "a"), ("error", "b"), ("log", "c")]
    )
    messages = parse_messages(stdout + "\n")
    assert [m["payload"] for m in messages] == ["a", "b", "c"]


def test_parse_messages_skips_garbage(caplog):
    stdout = 'not json\n\n[1, 2]\n{"type": "log", "payload": "ok", "generation": 1, "token": "t"}\n'
    with caplog.at_level(logging.WARNING, logger="sandbox.protocol"):
        messages = parse_messages(stdout)
    assert messages == [{"type": "log", "payload": "ok", "generation": 1, "token": "t"}]
    assert "non-JSON line 1" in caplog.text
    assert "non-object line 3" in caplog.text


def test_build_payload_round_trips():
    raw = build_payload("bridge();", "user();", ["setTimeout"], 4, "tok")
    assert json.loads(raw) == {
        "bridge": "bridge();",
        "script": "user();",
        "globals": ["setTimeout"],
        "generation": 4,
        "token": "tok",
    }


def test_parse_transpile_output():
    output, diagnostics = parse_transpile_output(
        json.dumps({"outputText": "const x = 5;\n", "diagnostics": ["';' expected."]})
    )
    assert output == "const x = 5;\n"
    assert diagnostics == ["';' expected."]


@pytest.mark.parametrize("stdout", ["[]", '{"diagnostics": []}', '{"outputText": "x", "diagnostics": "bad"}'])
def test_parse_transpile_output_rejects_bad_shapes(stdout):
    with pytest.raises(ValueError):
        parse_transpile_output(stdout)


class TestPolicy:
    def test_blocked_globals_never_exposed(self):
        exposed = policy.exposed_globals(["setTimeout", "require", "process", "fetch"])
        assert exposed == ["setTimeout", "fetch"]

    def test_default_globals_exclude_node_internals(self):
        exposed = policy.exposed_globals()
        for name in ("require", "process", "Buffer", "module"):
            assert name not in exposed
        assert "setTimeout" in exposed

    def test_node_flags_cap_heap(self):
        assert "--max-old-space-size=64" in policy.node_flags(64)

    def test_node_flags_block_host_code_generation(self):
        assert "--disallow-code-generation-from-strings" in policy.node_flags(128)
