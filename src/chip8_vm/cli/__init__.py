"""
CHIP-8 VM Command-Line Interface
================================

This package provides command-line tools for the CHIP-8 VM:

- **chip8-disasm**: Program disassembler
- **chip8-run**: Headless runner that prints the final framebuffer

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["disasm", "run"]
