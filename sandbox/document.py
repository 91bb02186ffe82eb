"""
Sandbox document synthesis.

Builds the throwaway HTML document loaded into the playground iframe through
``srcdoc``. The same bridge script and wrapped user code are reused by the
headless Node.js child, so the two execution paths report identically.
"""

from __future__ import annotations

import html
import json
import re

from sandbox import policy

_SCRIPT_CLOSE = re.compile(r"</(script)", re.IGNORECASE)
_COMMENT_OPEN = "<!--"

BRIDGE_TEMPLATE = """
(function (window, parent) {{
  "use strict";
  var run = {{ generation: {generation}, token: {token} }};
  var stringify = JSON.stringify;
  var toText = String;
  var lock = function (name, value) {{
    Object.defineProperty(window, name, {{ value: value, writable: false, configurable: false, enumerable: false }});
  }};
  var send = function (type, payload) {{
    parent.postMessage(
      {{ type: type, payload: payload, generation: run.generation, token: run.token }},
      "*"
    );
  }};
  var format = function (value) {{
    if (value !== null && typeof value === "object" && !("message" in value && "name" in value)) {{
      try {{
        return stringify(value);
      }} catch (err) {{
        return toText(value);
      }}
    }}
    return toText(value);
  }};
  var describe = function (err) {{
    if (err !== null && typeof err === "object" && "message" in err) {{
      return (err.name || "Error") + ": " + err.message;
    }}
    return format(err);
  }};
  var join = function (args) {{
    var text = "";
    for (var i = 0; i < args.length; i++) {{
      text += (i > 0 ? " " : "") + format(args[i]);
    }}
    return text;
  }};
  // Read-only globals: a user `function send` or `var send` cannot replace them.
  lock("send", send);
  lock("__describe", describe);
  console.log = function () {{
    send("log", join(arguments));
  }};
  console.error = function () {{
    send("error", join(arguments));
  }};
  window.onerror = function (message) {{
    send("error", toText(message));
    return true;
  }};
}})(window, parent);
""".strip()

WRAPPER_TEMPLATE = """
try {{
{code}
}} catch (err) {{
  send("error", __describe(err));
}}
""".strip()

DOCUMENT_TEMPLATE = """<!doctype html>
<html>
<head>
<meta charset="utf-8">
</head>
<body>
<script>
{bridge}
</script>
<script>
{script}
</script>
</body>
</html>"""


def build_bridge_script(generation: int = 0, token: str = "") -> str:
    """Script that redirects console output and uncaught errors to the parent."""
    return BRIDGE_TEMPLATE.format(generation=int(generation), token=json.dumps(token))


def wrap_user_code(code: str) -> str:
    """Guard synchronous throws; uncaught async errors go through window.onerror."""
    return WRAPPER_TEMPLATE.format(code=code)


def escape_script_text(text: str) -> str:
    """Keep text from closing its enclosing <script> element early.

    ``<\\/script`` and ``\\x3C!--`` read the same as the unescaped text inside JS
    string and template literals and in regex literals with or without the u flag.
    """
    escaped = _SCRIPT_CLOSE.sub(r"<\\/\1", text)
    return escaped.replace(_COMMENT_OPEN, "\\x3C!--")


def build_sandbox_document(code: str, generation: int = 0, token: str = "") -> str:
    """
    Synthesize the complete sandbox document for one run.

    The bridge lives in its own <script> element so that a syntax error in
    the user's code still reaches the already-installed window.onerror.
    """
    return DOCUMENT_TEMPLATE.format(
        bridge=build_bridge_script(generation, token),
        script=escape_script_text(wrap_user_code(code)),
    )


def build_iframe(document: str, title: str = "sandbox") -> str:
    """Return the script-only sandboxed iframe that loads ``document`` via srcdoc."""
    return (
        f'<iframe title="{html.escape(title, quote=True)}" '
        f'sandbox="{policy.IFRAME_SANDBOX}" '
        f'srcdoc="{html.escape(document, quote=True)}"></iframe>'
    )
