"""
Message formatting for raillog.

Serializes log arguments to text and wraps the resulting message into
fixed-width fragments. Every argument falls into exactly one
``ArgumentKind``, and each kind has its own serialization rule:

* **error**: the formatted traceback of the exception.
* **callable**: the qualified name and signature.
* **structured**: an indented JSON-style dump (containers, dataclasses,
  pydantic models, plain objects).
* **plain**: ``str()`` of strings, numbers, booleans, ``None`` and bytes.

Pathological arguments such as cyclic containers are not guarded
against; serializing them raises.
"""

from __future__ import annotations

import dataclasses
import inspect
import json
import traceback
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel

_PLAIN_TYPES = (str, int, float, complex, bool, bytes, bytearray, type(None))
_JSON_KEY_TYPES = (str, int, float, bool, type(None))


class ArgumentKind(str, Enum):
    """Closed set of log argument kinds."""

    ERROR = "error"
    CALLABLE = "callable"
    STRUCTURED = "structured"
    PLAIN = "plain"


@dataclass(frozen=True)
class MessageLine:
    """One wrapped fragment of a message.

    ``first`` and ``last`` drive the rail marker chosen by the renderer.
    """

    text: str
    first: bool
    last: bool


def classify(value: Any) -> ArgumentKind:
    """Return the ``ArgumentKind`` of *value*."""
    if isinstance(value, BaseException):
        return ArgumentKind.ERROR
    if isinstance(value, _PLAIN_TYPES) or isinstance(value, Enum):
        return ArgumentKind.PLAIN
    if callable(value) and not isinstance(value, BaseModel):
        return ArgumentKind.CALLABLE
    return ArgumentKind.STRUCTURED


def serialize(value: Any) -> str:
    """Serialize a single log argument according to its kind."""
    kind = classify(value)
    if kind is ArgumentKind.ERROR:
        return _serialize_error(value)
    if kind is ArgumentKind.CALLABLE:
        return _serialize_callable(value)
    if kind is ArgumentKind.STRUCTURED:
        return _serialize_structured(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def format_message(args: Iterable[Any]) -> str:
    """Serialize *args* and join them with single spaces."""
    return " ".join(serialize(arg) for arg in args)


def wrap(message: str, width: int | None) -> list[MessageLine]:
    """Split *message* into fragments of at most *width* characters.

    The message is scanned in *width*-sized chunks. A newline inside a
    chunk cuts it short and scanning resumes right after the newline, so
    explicit line breaks always force a new fragment.

    With *width* unset or non-positive the whole message is a single
    fragment. An empty message still yields one (empty) fragment.

    Args:
        message: Text to wrap.
        width: Maximum fragment width in characters.
    """
    if not width or width <= 0:
        texts = [message]
    else:
        texts = []
        pos = 0
        while pos < len(message):
            chunk = message[pos:pos + width]
            newline = chunk.find("\n")
            if newline == -1:
                texts.append(chunk)
                pos += width
            else:
                texts.append(chunk[:newline])
                pos += newline + 1
        if not texts:
            texts = [""]

    last = len(texts) - 1
    return [
        MessageLine(text=text, first=i == 0, last=i == last)
        for i, text in enumerate(texts)
    ]


# ── serialization rules ──


def _serialize_error(error: BaseException) -> str:
    return "".join(
        traceback.format_exception(type(error), error, error.__traceback__)
    ).rstrip("\n")


def _serialize_callable(value: Callable[..., Any]) -> str:
    name = getattr(value, "__qualname__", None) or type(value).__qualname__
    try:
        signature = str(inspect.signature(value))
    except (TypeError, ValueError):
        signature = "(...)"
    prefix = "class " if inspect.isclass(value) else ""
    return f"{prefix}{name}{signature}"


def _serialize_structured(value: Any) -> str:
    if isinstance(value, BaseModel):
        return value.model_dump_json(indent=2)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        value = dataclasses.asdict(value)
    elif not isinstance(value, (Mapping, list, tuple, set, frozenset)):
        attributes = getattr(value, "__dict__", None)
        if attributes is None:
            return repr(value)
        value = {"__type__": type(value).__qualname__, **attributes}
    return json.dumps(_json_keys(value), indent=2, default=_json_default, ensure_ascii=False)


def _json_default(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        return _json_keys(sorted(value, key=repr))
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _json_keys(dataclasses.asdict(value))
    return repr(value)


def _json_keys(value: Any, _active: set[int] | None = None) -> Any:
    """Copy *value* with mapping keys json cannot encode replaced by their ``repr()``.

    Cycles raise ``ValueError`` like ``json.dumps`` does.
    """
    if not isinstance(value, (Mapping, list, tuple)):
        return value
    active = _active if _active is not None else set()
    if id(value) in active:
        raise ValueError("Circular reference detected")
    active.add(id(value))
    try:
        if isinstance(value, Mapping):
            return {
                (key if isinstance(key, _JSON_KEY_TYPES) else repr(key)): _json_keys(item, active)
                for key, item in value.items()
            }
        return [_json_keys(item, active) for item in value]
    finally:
        active.discard(id(value))
