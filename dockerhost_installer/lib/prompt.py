from __future__ import annotations

from typing import Callable, Optional

from ..console import console

InputFn = Callable[[str], str]


def _reader(input_fn: Optional[InputFn]) -> InputFn:
    return input_fn or console.input


def confirm(question: str, *, input_fn: Optional[InputFn] = None) -> bool:
    """Ask a yes/no question; only an explicit ``y``/``Y`` counts as yes.

    Empty input and EOF are a "no". No state is kept between calls.
    """

    try:
        reply = _reader(input_fn)(f"{question} (y/n): ")
    except EOFError:
        return False
    return reply.strip() in {"y", "Y"}


def ask(question: str, *, input_fn: Optional[InputFn] = None) -> str:
    """Read one free-text answer (stripped, empty on EOF)."""

    try:
        reply = _reader(input_fn)(f"{question}: ")
    except EOFError:
        return ""
    return reply.strip()
