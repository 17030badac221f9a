"""
kscope Command-Line Interface
=============================

This package provides the command-line tools for kscope:

- **kparse**: parse Kaleidoscope source and report what was parsed

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["kparse"]
