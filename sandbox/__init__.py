"""
Sandbox Module

Isolated execution environment for playground JavaScript and TypeScript.

This module provides:
- TypeScript transpiling (single file, no type check)
- Sandbox HTML document synthesis for a script-only iframe
- Subprocess-based headless execution in a Node.js vm context
- Wall-clock timeout, CPU and heap limits (platform-dependent)
- Message bridge with per-run generation and token checks

WARNING: This sandbox is NOT a security boundary beyond what the browser
iframe sandbox or the Node.js vm module provide. It is suitable for a course
playground, not for hostile multi-tenant workloads.
"""

__version__ = "0.1.0"
