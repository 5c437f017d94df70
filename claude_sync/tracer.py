"""
Follow-Through Tracer

Step-by-step tracing of sync operations: what came in, which store was
touched, what went out. Silent unless follow-through mode is enabled.
"""
import asyncio
import functools
import logging
from typing import Any, Callable
from datetime import datetime

from .config import Settings

# Dedicated logger for follow-through tracing
tracer = logging.getLogger("followthrough")

_enabled = False


def _preview(data: Any, max_len: int = 50) -> str:
    """Create a short preview of data."""
    if data is None:
        return "<None>"
    text = str(data)
    if len(text) > max_len:
        return f"{text[:max_len]}..."
    return text


def _format_step(icon: str, step: str, module: str, detail: str = "") -> str:
    """Format a trace step with consistent styling."""
    timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
    base = f"[{timestamp}] {icon} [{module}] {step}"
    if detail:
        return f"{base}: {detail}"
    return base


def trace_input(module: str, input_name: str, value: Any):
    """Log an input value entering a module."""
    if not _enabled:
        return
    tracer.info(_format_step("→", f"INPUT {input_name}", module, _preview(value)))


def trace_step(module: str, description: str):
    """Log a general step in processing."""
    if not _enabled:
        return
    tracer.info(_format_step("•", "STEP", module, description))


def trace_output(module: str, output_name: str, value: Any):
    """Log an output value leaving a module."""
    if not _enabled:
        return
    tracer.info(_format_step("←", f"OUTPUT {output_name}", module, _preview(value)))


def traced(module: str):
    """
    Decorator tracing entry/exit of an async operation.

    Usage:
        @traced("services.sync")
        async def sync_project(...):
            ...
    """
    def decorator(func: Callable) -> Callable:
        if not asyncio.iscoroutinefunction(func):
            raise TypeError(f"traced() expects a coroutine function, got {func.__name__}")

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            if not _enabled:
                return await func(*args, **kwargs)

            name = func.__name__
            tracer.info(_format_step("▶", "CALL", module, f"calling {name}()"))
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                tracer.info(_format_step("◀", "RESULT", module, f"{name}() ✗ FAILED => {_preview(e)}"))
                raise
            tracer.info(_format_step("◀", "RESULT", module, f"{name}() ✓ SUCCESS => {_preview(result)}"))
            return result

        return wrapper

    return decorator


def setup_follow_through_logging(settings: Settings):
    """Configure the follow-through logger."""
    global _enabled
    _enabled = settings.follow_through
    if not _enabled or tracer.handlers:
        return

    handler = logging.StreamHandler()
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter('%(message)s'))

    tracer.addHandler(handler)
    tracer.setLevel(logging.INFO)
    tracer.propagate = False  # Don't propagate to root logger

    tracer.info("\n" + "=" * 50)
    tracer.info("  FOLLOW-THROUGH MODE ENABLED")
    tracer.info("  Tracing sync operations...")
    tracer.info("=" * 50 + "\n")
