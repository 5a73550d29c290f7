"""
chip8-vm Command-Line Interface
===============================

This package provides command-line tools for the CHIP-8 VM:

- **c8run**: headless runner that executes a program image and prints
  the final screen

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["c8run"]
