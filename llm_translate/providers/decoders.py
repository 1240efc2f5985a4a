"""
Incremental stream decoders.

Each decoder turns raw response bytes into StreamEvents. Frames may be split
across any number of network chunks; the undecoded remainder (partial lines
and partial UTF-8 sequences) is buffered between calls. Every decoder emits
exactly one terminal Done and nothing after it.
"""
import codecs
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .errors import DecodeError
from .transport import extract_error_message
from .types import ContentDelta, Done, ErrorEvent, ReasoningDelta, StreamEvent

logger = logging.getLogger(__name__)


def _first(items: Any, field: str) -> Dict[str, Any]:
    """First element of a JSON array of objects; absent or empty reads as {}."""
    if items is None or items == []:
        return {}
    if not isinstance(items, list) or not isinstance(items[0], dict):
        raise DecodeError(f"expected a list of objects for {field!r}")
    return items[0]


def _object(value: Any, field: str) -> Dict[str, Any]:
    """A nested JSON object; absent or null reads as {}."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise DecodeError(f"expected an object for {field!r}")
    return value


class StreamDecoder(ABC):
    """Line framing, UTF-8 decoding and the terminal Done event."""

    def __init__(self):
        self._text_decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self._done = False

    @property
    def done(self) -> bool:
        return self._done

    def decode(self, chunk: bytes) -> List[StreamEvent]:
        """Decode one network chunk into zero or more events."""
        if self._done or not chunk:
            return []
        self._buffer += self._text_decoder.decode(chunk)
        return self._drain_lines()

    def finish(self) -> List[StreamEvent]:
        """Signal end of transport; decodes a trailing unterminated line."""
        if self._done:
            return []
        self._buffer += self._text_decoder.decode(b"", final=True)
        events = self._drain_lines()
        if not self._done and self._buffer:
            line, self._buffer = self._buffer, ""
            events.extend(self._process_line(line.rstrip("\r")))
        if not self._done:
            events.extend(self._end())
        self._buffer = ""
        return events

    def _drain_lines(self) -> List[StreamEvent]:
        events: List[StreamEvent] = []
        while not self._done:
            idx = self._buffer.find("\n")
            if idx < 0:
                break
            line = self._buffer[:idx].rstrip("\r")
            self._buffer = self._buffer[idx + 1:]
            events.extend(self._process_line(line))
        if self._done:
            # Anything after end-of-stream is discarded
            self._buffer = ""
        return events

    def _process_line(self, line: str) -> List[StreamEvent]:
        try:
            return self._handle_line(line)
        except DecodeError as e:
            logger.debug(f"Skipping undecodable frame: {e}")
            return []

    def _end(self) -> List[StreamEvent]:
        self._done = True
        return [Done()]

    @staticmethod
    def _parse_json(payload: str) -> Dict[str, Any]:
        try:
            data = json.loads(payload)
        except (json.JSONDecodeError, ValueError) as e:
            raise DecodeError(f"invalid JSON: {payload[:80]!r}") from e
        if not isinstance(data, dict):
            raise DecodeError(f"expected a JSON object: {payload[:80]!r}")
        return data

    @abstractmethod
    def _handle_line(self, line: str) -> List[StreamEvent]:
        """Turn one complete line into events; raise DecodeError to skip it."""


class EventStreamDecoder(StreamDecoder):
    """
    Server-sent events framing.

    Only ``data:`` lines carry payloads. Comment, ``event:``, ``id:`` and blank
    lines are ignored; the ``[DONE]`` sentinel ends the stream.
    """

    DATA_PREFIX = "data:"
    SENTINEL = "[DONE]"

    def _handle_line(self, line: str) -> List[StreamEvent]:
        if not line.startswith(self.DATA_PREFIX):
            return []
        payload = line[len(self.DATA_PREFIX):].strip()
        if not payload:
            return []
        if payload == self.SENTINEL:
            return self._end()
        return self._handle_payload(self._parse_json(payload))

    @abstractmethod
    def _handle_payload(self, data: Dict[str, Any]) -> List[StreamEvent]:
        pass


class ChatCompletionsDecoder(EventStreamDecoder):
    """``choices[0].delta.content`` plus optional ``reasoning_content``."""

    def _handle_payload(self, data: Dict[str, Any]) -> List[StreamEvent]:
        if "error" in data:
            return [ErrorEvent(message=extract_error_message(data) or "Stream error")]

        delta = _object(_first(data.get("choices"), "choices").get("delta"), "delta")
        events: List[StreamEvent] = []

        reasoning = delta.get("reasoning_content")
        if isinstance(reasoning, str) and reasoning:
            events.append(ReasoningDelta(text=reasoning))

        content = delta.get("content")
        if isinstance(content, str) and content:
            events.append(ContentDelta(text=content))
        return events


class MessagesEventDecoder(EventStreamDecoder):
    """
    Typed content-block events.

    ``delta.type`` decides between reasoning (``thinking_delta``) and content
    (``text_delta``). The open block type is tracked for deltas that carry
    no sub-type.
    """

    def __init__(self):
        super().__init__()
        self.current_block_type: Optional[str] = None

    def _handle_payload(self, data: Dict[str, Any]) -> List[StreamEvent]:
        event_type = data.get("type")

        if event_type == "content_block_start":
            block = _object(data.get("content_block"), "content_block")
            self.current_block_type = block.get("type")
            return []

        if event_type == "content_block_delta":
            return self._handle_delta(_object(data.get("delta"), "delta"))

        if event_type == "content_block_stop":
            self.current_block_type = None
            return []

        if event_type == "message_stop":
            return self._end()

        if event_type == "error":
            return [ErrorEvent(message=extract_error_message(data) or "Stream error")]

        # message_start, message_delta, ping
        return []

    def _handle_delta(self, delta: Dict[str, Any]) -> List[StreamEvent]:
        delta_type = delta.get("type")
        if delta_type is None:
            delta_type = {"thinking": "thinking_delta", "text": "text_delta"}.get(
                self.current_block_type or ""
            )

        if delta_type == "thinking_delta":
            thinking = delta.get("thinking")
            if isinstance(thinking, str) and thinking:
                return [ReasoningDelta(text=thinking)]
        elif delta_type == "text_delta":
            text = delta.get("text")
            if isinstance(text, str) and text:
                return [ContentDelta(text=text)]
        return []


class GenerateContentDecoder(EventStreamDecoder):
    """``candidates[0].content.parts[0].text`` per event."""

    def _handle_payload(self, data: Dict[str, Any]) -> List[StreamEvent]:
        if "error" in data:
            return [ErrorEvent(message=extract_error_message(data) or "Stream error")]

        content = _object(_first(data.get("candidates"), "candidates").get("content"), "content")
        text = _first(content.get("parts"), "parts").get("text")
        if isinstance(text, str) and text:
            return [ContentDelta(text=text)]
        return []


class NDJSONDecoder(StreamDecoder):
    """One JSON object per non-empty line."""

    def _handle_line(self, line: str) -> List[StreamEvent]:
        if not line.strip():
            return []
        return self._handle_payload(self._parse_json(line))

    @abstractmethod
    def _handle_payload(self, data: Dict[str, Any]) -> List[StreamEvent]:
        pass


class OllamaChatDecoder(NDJSONDecoder):
    """``message.content`` per line; ``"done": true`` ends the stream."""

    def _handle_payload(self, data: Dict[str, Any]) -> List[StreamEvent]:
        if "error" in data:
            return [ErrorEvent(message=extract_error_message(data) or "Stream error")]

        events: List[StreamEvent] = []
        message = _object(data.get("message"), "message")

        # Present when the model runs in think mode
        thinking = message.get("thinking")
        if isinstance(thinking, str) and thinking:
            events.append(ReasoningDelta(text=thinking))

        content = message.get("content")
        if isinstance(content, str) and content:
            events.append(ContentDelta(text=content))

        if data.get("done") is True:
            events.extend(self._end())
        return events
