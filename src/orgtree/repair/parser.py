"""Escalating repair pipeline for almost-valid JSON from LLM responses."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from ..exceptions import RepairFailure
from .strategies import DEFAULT_STRATEGIES, RepairStrategy

logger = logging.getLogger("orgtree")

DEFAULT_PREVIEW_CHARS = 200


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def strict_loads(text: str) -> Any:
    """``json.loads`` that also rejects NaN / Infinity."""
    return json.loads(text, parse_constant=_reject_constant)


def make_preview(raw: str, limit: int = DEFAULT_PREVIEW_CHARS) -> str:
    """Bound ``raw`` to ``limit`` characters for diagnostics."""
    if len(raw) <= limit:
        return raw
    return raw[:limit] + "..."


@dataclass
class ParseResult:
    """Outcome of a repair run.

    Exactly one of ``value`` (with ``strategy`` set) or ``failure`` is
    meaningful.  ``lossy`` is set when a lossy transform contributed to
    the text that finally parsed.
    """

    value: Any = None
    strategy: str = ""
    attempted: list[str] = field(default_factory=list)
    lossy: bool = False
    failure: RepairFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    def unwrap(self) -> Any:
        if self.failure is not None:
            raise self.failure
        return self.value


class RepairParser:
    """Apply repair strategies in order until one yields strict JSON."""

    def __init__(
        self,
        strategies: Sequence[RepairStrategy] | None = None,
        preview_chars: int = DEFAULT_PREVIEW_CHARS,
    ) -> None:
        self._strategies = list(
            DEFAULT_STRATEGIES if strategies is None else strategies
        )
        self._preview_chars = preview_chars

    @property
    def strategy_names(self) -> list[str]:
        return [s.name for s in self._strategies]

    def parse(self, raw: str) -> ParseResult:
        result = ParseResult()
        candidate = raw
        tried: str | None = None
        lossy = False
        last_error = "no repair strategy produced a candidate"

        for strategy in self._strategies:
            result.attempted.append(strategy.name)
            transformed = strategy.transform(candidate)
            if strategy.lossy and transformed != candidate:
                lossy = True
            candidate = transformed
            if candidate == tried:
                continue
            tried = candidate
            try:
                value = strict_loads(candidate)
            except (ValueError, RecursionError) as e:
                last_error = str(e)
                continue

            result.value = value
            result.strategy = strategy.name
            result.lossy = lossy
            if lossy:
                logger.warning(
                    "JSON parsed after lossy quote normalization (%s); "
                    "apostrophes inside strings may have been rewritten",
                    strategy.name,
                )
            else:
                logger.debug("JSON parsed via %s strategy", strategy.name)
            return result

        logger.warning(
            "Could not repair JSON after %d strategies: %s",
            len(result.attempted),
            last_error,
        )
        result.failure = RepairFailure(
            make_preview(raw, self._preview_chars), last_error
        )
        return result


def repair_and_parse(
    raw: str, preview_chars: int = DEFAULT_PREVIEW_CHARS
) -> ParseResult:
    """Repair and parse ``raw`` with the default strategy pipeline.

    Never raises for malformed or over-nested input; check ``ParseResult.ok`` or call
    ``unwrap()``.
    """
    return RepairParser(preview_chars=preview_chars).parse(raw)


def loads(raw: str, preview_chars: int = DEFAULT_PREVIEW_CHARS) -> Any:
    """Repair and decode ``raw``; raises RepairFailure when nothing parses."""
    return repair_and_parse(raw, preview_chars).unwrap()
