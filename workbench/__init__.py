"""
Workbench Module

Configuration and CLI.

This module provides:
- YAML-based playground configuration
- CLI for running files, examples and lesson snippets
- Sandbox document export for embedding in a page
"""

__version__ = "0.1.0"
