"""Separate <think>/<thinking>/<reasoning> markup from streamed model output."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class BlockKind(str, Enum):
    NONE = "none"
    THINK = "think"
    THINKING = "thinking"
    REASONING = "reasoning"


_MARKER_RE = re.compile(r"</?(think|thinking|reasoning)>", re.IGNORECASE)
_MARKERS = tuple(
    marker
    for kind in (BlockKind.THINK, BlockKind.THINKING, BlockKind.REASONING)
    for marker in (f"<{kind.value}>", f"</{kind.value}>")
)


def _is_marker_prefix(fragment: str) -> bool:
    lowered = fragment.lower()
    return any(marker.startswith(lowered) and marker != lowered for marker in _MARKERS)


@dataclass
class ExtractorState:
    visible_buffer: str = ""
    reasoning_buffer: str = ""
    inside_block: bool = False
    block_kind: BlockKind = BlockKind.NONE


class ThinkingExtractor:
    """Incremental splitter for text containing inline reasoning blocks.

    Both buffers only ever grow. Text that might still turn into a tag marker
    is held back until the next chunk decides it, so nothing routed to the
    visible buffer is ever taken back.

    Reasoning from blocks of different kinds is kept in order of appearance,
    not grouped by kind.
    """

    def __init__(self):
        self.state = ExtractorState()
        self._pending = ""

    @property
    def visible(self) -> str:
        return self.state.visible_buffer

    @property
    def reasoning(self) -> str:
        return self.state.reasoning_buffer

    def feed(self, chunk: str) -> tuple[str, str]:
        """Consume more text. Returns the (visible, reasoning) text appended."""
        if not chunk:
            return "", ""
        self._pending += chunk
        return self._scan(final=False)

    def flush(self) -> tuple[str, str]:
        """Route held-back text at end of stream. Returns the text appended."""
        return self._scan(final=True)

    def finish(self) -> tuple[str, str]:
        """Flush held-back text and return the trimmed (visible, reasoning)."""
        self.flush()
        return self.state.visible_buffer.strip(), self.state.reasoning_buffer.strip()

    def _route(self, text: str, visible_parts: list[str], reasoning_parts: list[str]) -> None:
        if not text:
            return
        if self.state.inside_block:
            reasoning_parts.append(text)
        else:
            visible_parts.append(text)

    def _scan(self, final: bool) -> tuple[str, str]:
        visible_parts: list[str] = []
        reasoning_parts: list[str] = []
        state = self.state

        while True:
            match = _MARKER_RE.search(self._pending)
            if match is None:
                break
            self._route(self._pending[:match.start()], visible_parts, reasoning_parts)
            self._pending = self._pending[match.end():]

            kind = BlockKind(match.group(1).lower())
            is_close = match.group(0).startswith("</")
            if not state.inside_block:
                # stray close markers are dropped
                if not is_close:
                    state.inside_block = True
                    state.block_kind = kind
            elif is_close and kind == state.block_kind:
                state.inside_block = False
                state.block_kind = BlockKind.NONE

        if final:
            self._route(self._pending, visible_parts, reasoning_parts)
            self._pending = ""
        else:
            idx = self._pending.rfind("<")
            if idx >= 0 and _is_marker_prefix(self._pending[idx:]):
                self._route(self._pending[:idx], visible_parts, reasoning_parts)
                self._pending = self._pending[idx:]
            else:
                self._route(self._pending, visible_parts, reasoning_parts)
                self._pending = ""

        visible_added = "".join(visible_parts)
        reasoning_added = "".join(reasoning_parts)
        state.visible_buffer += visible_added
        state.reasoning_buffer += reasoning_added
        return visible_added, reasoning_added


def extract_thinking(text: str) -> tuple[str, str]:
    """One-shot split of a complete response into (visible, reasoning)."""
    extractor = ThinkingExtractor()
    extractor.feed(text)
    return extractor.finish()
