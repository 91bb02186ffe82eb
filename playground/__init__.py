"""
Playground Module

Shared code/language state and the controller that runs it.

This module provides:
- Injectable playground store with atomic load and reset
- Built-in example snippets and lesson snippet extraction
- Run orchestration: transpile, execute, relay output and errors
- Error line classification
"""

__version__ = "0.1.0"
