"""Diagnostic context carried from loggers to GELF fields."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, MutableMapping, Tuple

__all__ = [
    "CONTEXT_ATTR",
    "NDC_ATTR",
    "ContextAdapter",
    "ContextState",
    "inject_context",
    "record_context",
    "record_ndc",
]

CONTEXT_ATTR = "gelf_context"
NDC_ATTR = "gelf_ndc"


@dataclass(slots=True)
class ContextState:
    """Mapped values plus a stack of nested labels."""

    context: Dict[str, Any] = field(default_factory=dict)
    stack: List[str] = field(default_factory=list)

    def ndc(self) -> str | None:
        return " ".join(self.stack) if self.stack else None


class ContextAdapter(logging.LoggerAdapter):
    """Logger adapter that attaches mapped and nested context to records.

    Mapped values end up as GELF additional fields and the nested stack as
    ``loggerNdc`` when the handler adds extended information.
    """

    def __init__(self, logger: logging.Logger, *, base_context: Mapping[str, Any] | None = None) -> None:
        super().__init__(logger, {})
        self._state = ContextState(context=dict(base_context or {}))

    @property
    def context(self) -> Dict[str, Any]:
        return dict(self._state.context)

    def set_context(self, ctx: Mapping[str, Any]) -> None:
        self._state.context = dict(ctx)

    def add_context(self, **kwargs: Any) -> None:
        self._state.context.update(kwargs)

    def remove_context(self, *keys: str) -> None:
        for key in keys:
            self._state.context.pop(key, None)

    def push(self, label: str) -> None:
        self._state.stack.append(str(label))

    def pop(self) -> str | None:
        return self._state.stack.pop() if self._state.stack else None

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> Tuple[str, MutableMapping[str, Any]]:
        call_extra = kwargs.get("extra")
        merged: Dict[str, Any] = dict(call_extra) if isinstance(call_extra, Mapping) else {}
        merged[CONTEXT_ATTR] = dict(self._state.context)
        ndc = self._state.ndc()
        if ndc is not None:
            merged[NDC_ATTR] = ndc
        kwargs["extra"] = merged
        return msg, kwargs


def inject_context(logger: logging.Logger, *, base_context: Mapping[str, Any] | None = None) -> ContextAdapter:
    """Return a :class:`ContextAdapter` wrapping ``logger``."""

    return ContextAdapter(logger, base_context=base_context)


def record_context(record: logging.LogRecord) -> Dict[str, Any]:
    value = getattr(record, CONTEXT_ATTR, None)
    return dict(value) if isinstance(value, Mapping) else {}


def record_ndc(record: logging.LogRecord) -> str | None:
    value = getattr(record, NDC_ATTR, None)
    return str(value) if value else None
