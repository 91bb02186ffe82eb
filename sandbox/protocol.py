"""
Child process protocol for sandbox execution.

The parent writes one JSON payload to the child's stdin. The execution child
answers with one JSON object per line on stdout, each being exactly what the
sandboxed code handed to ``parent.postMessage``. The transpile child answers
with a single JSON object.
"""

from __future__ import annotations

import json
import logging
from typing import cast

logger = logging.getLogger(__name__)

CHILD_TEMPLATE = r"""
"use strict";
const fs = require("fs");
const vm = require("vm");

const raw = fs.readFileSync(0, "utf8");
const payload = raw ? JSON.parse(raw) : {};

const write = (line) => {
  process.stdout.write(line + "\n");
};

const describe = (err) =>
  err !== null && typeof err === "object" && "message" in err
    ? (err.name || "Error") + ": " + err.message
    : String(err);

// window, parent and console are built inside the context, so their
// constructors lead to the context's Function rather than the host's.
const INSTALL = `(function (write, host) {
  "use strict";
  var stringify = JSON.stringify;
  var names = Object.keys(host);
  for (var i = 0; i < names.length; i++) {
    globalThis[names[i]] = host[names[i]];
  }
  globalThis.console = {};
  globalThis.parent = {
    postMessage: function (data) {
      write(stringify(data));
    },
  };
  globalThis.window = globalThis;
})`;

const context = vm.createContext({}, { name: "playground", codeGeneration: { wasm: false } });
const host = {};
for (const name of payload.globals || []) {
  if (name in globalThis) {
    host[name] = globalThis[name];
  }
}
vm.runInContext(INSTALL, context, { filename: "install.js" })(write, host);

const report = (err) => {
  const message = describe(err);
  if (typeof context.onerror === "function") {
    try {
      context.onerror(message, "sandbox.js", 0, 0, err);
      return;
    } catch (handlerError) {
      // fall through to a direct report
    }
  }
  write(JSON.stringify({ type: "error", payload: message, generation: payload.generation, token: payload.token }));
};

process.on("uncaughtException", report);
process.on("unhandledRejection", report);

for (const [filename, source] of [["bridge.js", payload.bridge], ["sandbox.js", payload.script]]) {
  try {
    vm.runInContext(source || "", context, { filename });
  } catch (err) {
    report(err);
    break;
  }
}
""".strip()


TRANSPILE_TEMPLATE = r"""
const fs = require("fs");
const ts = require("typescript");

const raw = fs.readFileSync(0, "utf8");
const payload = raw ? JSON.parse(raw) : {};

const target = ts.ScriptTarget[payload.target];
const moduleKind = ts.ModuleKind[payload.module];
const result = ts.transpileModule(payload.code || "", {
  compilerOptions: {
    target: target === undefined ? ts.ScriptTarget.ES2020 : target,
    module: moduleKind === undefined ? ts.ModuleKind.ESNext : moduleKind,
  },
  fileName: "playground.ts",
  reportDiagnostics: true,
});

process.stdout.write(
  JSON.stringify({
    outputText: result.outputText,
    diagnostics: (result.diagnostics || []).map((d) =>
      ts.flattenDiagnosticMessageText(d.messageText, "\n")
    ),
  })
);
""".strip()


def build_payload(
    bridge: str,
    script: str,
    globals_: list[str],
    generation: int,
    token: str,
) -> str:
    return json.dumps(
        {
            "bridge": bridge,
            "script": script,
            "globals": globals_,
            "generation": generation,
            "token": token,
        }
    )


def parse_messages(stdout: str) -> list[dict[str, object]]:
    """Decode the child's JSON lines in arrival order, skipping anything malformed."""
    messages: list[dict[str, object]] = []
    for line_no, line in enumerate(stdout.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            loaded = cast(object, json.loads(line))
        except json.JSONDecodeError as exc:
            logger.warning(f"Skipping non-JSON line {line_no} from sandbox: {exc}")
            continue
        if not isinstance(loaded, dict):
            logger.warning(f"Skipping non-object line {line_no} from sandbox")
            continue
        messages.append(cast(dict[str, object], loaded))
    return messages


def parse_transpile_output(stdout: str) -> tuple[str, list[str]]:
    """Decode the transpile child's reply into (output text, diagnostics)."""
    loaded = cast(object, json.loads(stdout))
    if not isinstance(loaded, dict):
        raise ValueError("Invalid response type from transpiler")
    data = cast(dict[str, object], loaded)
    output = data.get("outputText")
    if not isinstance(output, str):
        raise ValueError("Transpiler response is missing outputText")
    diagnostics_value = data.get("diagnostics") or []
    if not isinstance(diagnostics_value, list):
        raise ValueError("Transpiler diagnostics must be a list")
    return output, [str(d) for d in diagnostics_value]
