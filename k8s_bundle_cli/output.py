"""Standardized terminal output utilities.

All user-facing CLI messages should use these functions for consistent
formatting across the application.

Basic Usage:
    from k8s_bundle_cli.output import success, info, warn, error, detail

    success("memcached-operator.v0.0.1 passed all checks")
    info("Loading bundle ./bundle")
    warn("No metadata/annotations.yaml found")
    error("operators.operatorframework.io/maxKubeVersion is required")
    detail("Hint: add the annotation to the CSV")
"""

from __future__ import annotations

import sys
from typing import TextIO

import click

# ANSI color codes via click's style system
_STYLES = {
    "success": {"fg": "green"},
    "info": {"fg": "blue"},
    "warn": {"fg": "yellow"},
    "error": {"fg": "red"},
    "detail": {"fg": "bright_black"},  # Dimmed/gray
}

_PREFIXES = {
    "success": "✓",  # checkmark
    "info": "→",  # arrow
    "warn": "⚠",  # warning
    "error": "✗",  # X
    "detail": " ",  # space (no prefix, just indent)
}


def _output(message: str, style: str, *, file: TextIO | None = None) -> None:
    """Internal helper for styled output.

    Args:
        message: The message to display.
        style: The style name (success, error, info, warn, detail).
        file: File to write to.
    """
    fg_color = _STYLES[style]["fg"]
    styled_prefix = click.style(_PREFIXES[style], fg=fg_color)
    styled_message = click.style(message, fg=fg_color)
    click.echo(f"{styled_prefix} {styled_message}", file=file)


def success(message: str, *, file: TextIO | None = None) -> None:
    """Print a success message with green checkmark.

    Example:
        >>> success("memcached-operator.v0.0.1 passed all checks")
        ✓ memcached-operator.v0.0.1 passed all checks
    """
    _output(message, "success", file=file)


def info(message: str, *, file: TextIO | None = None) -> None:
    """Print an info message with blue arrow."""
    _output(message, "info", file=file)


def warn(message: str, *, file: TextIO | None = None) -> None:
    """Print a warning message with yellow warning symbol (default: stderr)."""
    _output(message, "warn", file=file or sys.stderr)


def error(message: str, *, file: TextIO | None = None) -> None:
    """Print an error message with red X (default: stderr)."""
    _output(message, "error", file=file or sys.stderr)


def detail(message: str, *, file: TextIO | None = None) -> None:
    """Print a detail message in dimmed text."""
    _output(message, "detail", file=file)
