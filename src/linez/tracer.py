"""
Hierarchical runtime tracing for linez.

Provides structured, nested logging with timing information. The optimization
loop reports progress and candidate faults through the process-wide tracer.
"""

import functools
import json
import sys
import threading
import time
from contextlib import contextmanager
from datetime import datetime


class TracerConfig:
    """Configuration for the tracer."""

    def __init__(self):
        self.enabled = False
        self.level = "INFO"
        self.file_path = None
        self.json_output = False
        self._file_handle = None

    def configure(self, enabled=False, level="INFO", file_path=None, json_output=False):
        """Configure tracer settings."""
        self.enabled = enabled
        self.level = level.upper()
        self.file_path = file_path
        self.json_output = json_output

        if self._file_handle:
            self._file_handle.close()
            self._file_handle = None

        if file_path and enabled:
            self._file_handle = open(file_path, "w", encoding="utf-8")

    def close(self):
        """Close file handle if open."""
        if self._file_handle:
            self._file_handle.close()
            self._file_handle = None


class Tracer:
    """
    Hierarchical tracer for structured logging.

    Supports nested spans with timing, argument summarization, and
    text or JSON-lines output.
    """

    LEVELS = {"ERROR": 0, "WARN": 1, "INFO": 2, "DEBUG": 3}

    def __init__(self):
        self.config = TracerConfig()
        self._local = threading.local()

    @property
    def _span_stack(self):
        """Open spans of the calling thread, innermost last."""
        stack = getattr(self._local, "stack", None)
        if stack is None:
            stack = self._local.stack = []
        return stack

    def is_enabled_for(self, level):
        """Check if records at this level would be written."""
        if not self.config.enabled:
            return False
        return self.LEVELS.get(level, 2) <= self.LEVELS.get(self.config.level, 2)

    def _format_timestamp(self):
        """Format current time as HH:MM:SS.mmm."""
        now = datetime.now()
        return now.strftime("%H:%M:%S.") + f"{now.microsecond // 1000:03d}"

    def _write(self, level, module, func, message, meta=None):
        """Write a log line."""
        if not self.is_enabled_for(level):
            return

        timestamp = self._format_timestamp()
        indent = "  " * len(self._span_stack)
        location = f"{module}:{func}" if func else module

        text_line = f"{timestamp} {level:<5} {indent}{location}  {message}"
        print(text_line, file=sys.stderr)

        if self.config._file_handle:
            self.config._file_handle.write(text_line + "\n")
            self.config._file_handle.flush()

        if self.config.json_output:
            json_record = {
                "timestamp": timestamp,
                "level": level,
                "depth": len(self._span_stack),
                "module": module,
                "function": func,
                "message": message,
                "meta": {k: summarize(v) for k, v in (meta or {}).items()},
            }
            json_line = json.dumps(json_record)
            print(json_line, file=sys.stderr)
            if self.config._file_handle:
                self.config._file_handle.write(json_line + "\n")

    @contextmanager
    def span(self, name, module="", **meta):
        """
        Context manager for a traced span.

        Logs start and end with timing information.
        """
        if not self.config.enabled:
            yield
            return

        start_time = time.perf_counter()
        meta_str = " ".join(f"{k}={summarize(v)}" for k, v in meta.items())
        self._write("INFO", module, name, f"start {meta_str}".strip())
        self._span_stack.append((name, module, start_time))

        try:
            yield
        except BaseException as e:
            elapsed = (time.perf_counter() - start_time) * 1000
            self._span_stack.pop()
            self._write("ERROR", module, name, f"failed dt={elapsed:.0f}ms error={type(e).__name__}: {str(e)[:100]}")
            raise
        else:
            elapsed = (time.perf_counter() - start_time) * 1000
            self._span_stack.pop()
            self._write("INFO", module, name, f"end ok dt={elapsed:.0f}ms")

    def event(self, message, level="INFO", **meta):
        """Log a one-off event within the current span."""
        if not self.is_enabled_for(level):
            return

        module = ""
        func = ""
        if self._span_stack:
            func, module, _ = self._span_stack[-1]

        meta_str = " ".join(f"{k}={summarize(v)}" for k, v in meta.items())
        full_message = f"{message} {meta_str}".strip()
        self._write(level, module, func, full_message, meta)


def summarize(obj, max_len=200):
    """
    Summarize an object for logging.

    Returns a compact string representation that never exceeds max_len chars.
    Handles numpy arrays, raster buffers, coverages, pydantic models,
    strings, containers and numbers.
    """
    try:
        result = _summarize_impl(obj)
        if len(result) > max_len:
            return result[:max_len - 3] + "..."
        return result
    except Exception:
        return f"<{type(obj).__name__}>"


def _summarize_impl(obj):
    """Implementation of summarize without length capping."""
    import numpy as np
    from pydantic import BaseModel

    if obj is None:
        return "None"

    type_name = type(obj).__name__

    if isinstance(obj, np.ndarray):
        shape_str = "x".join(str(s) for s in obj.shape)
        return f"ndarray({obj.dtype},{shape_str})"

    if isinstance(obj, np.generic):
        return str(obj.item())

    # RasterBuffer and friends expose width/height
    if hasattr(obj, "width") and hasattr(obj, "height") and hasattr(obj, "readonly"):
        mode = "ro" if obj.readonly else "rw"
        return f"{type_name}({obj.width}x{obj.height},{mode})"

    if isinstance(obj, BaseModel):
        fields = list(type(obj).model_fields.keys())[:3]
        return f"{type_name}(fields={fields}...)"

    if isinstance(obj, str):
        if len(obj) > 50:
            return f"str(len={len(obj)})"
        return repr(obj)

    if isinstance(obj, (list, tuple)):
        if len(obj) == 0:
            return f"{type_name}(len=0)"
        if len(obj) <= 4 and all(isinstance(v, (int, float)) for v in obj):
            return f"{type_name}({', '.join(str(v) for v in obj)})"
        return f"{type_name}(len={len(obj)},first={type(obj[0]).__name__})"

    if isinstance(obj, dict):
        keys = list(obj.keys())[:5]
        keys_str = ",".join(str(k) for k in keys)
        return f"dict(len={len(obj)},keys=[{keys_str}])"

    if isinstance(obj, bool):
        return str(obj)

    if isinstance(obj, float):
        return f"{obj:.6g}"

    if isinstance(obj, int):
        return str(obj)

    if hasattr(obj, "__len__"):
        return f"{type_name}(len={len(obj)})"

    return f"<{type_name}>"


def trace(label=None):
    """
    Decorator to trace function execution.

    Wraps a function in a span that logs start/end with timing.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if not _tracer.config.enabled:
                return func(*args, **kwargs)

            func_module = func.__module__.split(".")[-1] if func.__module__ else ""
            func_name = label or func.__name__

            with _tracer.span(func_name, module=func_module):
                return func(*args, **kwargs)

        return wrapper
    return decorator


# Global tracer instance
_tracer = Tracer()


def get_tracer():
    """Get the global tracer instance."""
    return _tracer


def configure_tracer(enabled=False, level="INFO", file_path=None, json_output=False):
    """Configure the global tracer."""
    _tracer.config.configure(
        enabled=enabled,
        level=level,
        file_path=file_path,
        json_output=json_output,
    )
