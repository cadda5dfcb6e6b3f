"""Context propagation for log correlation within one generation run."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from uuid import uuid4


generation_context_var: ContextVar[dict | None] = ContextVar("generation_context", default=None)


def generate_run_id() -> str:
    """Generate a 16-char hex run ID."""
    return uuid4().hex[:16]


def get_generation_context() -> dict:
    """Get current generation context; a run_id is created on first access."""
    ctx = generation_context_var.get()
    if ctx is None or not ctx.get("run_id"):
        ctx = {**(ctx or {}), "run_id": generate_run_id()}
        generation_context_var.set(ctx)
    return ctx


def set_generation_context(run_id: str, **extra: object) -> None:
    """Replace the generation context for the current context."""
    generation_context_var.set({"run_id": run_id, **extra})


@contextmanager
def generation_context(**extra: object) -> Iterator[dict]:
    """Add ``extra`` keys to the context for the duration of the block."""
    ctx = {**get_generation_context(), **extra}
    token = generation_context_var.set(ctx)
    try:
        yield ctx
    finally:
        generation_context_var.reset(token)
