"""
Stream conversion from Anthropic SSE format to OpenAI streaming format.
"""
import time
import json
import logging
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Callable, Dict, List, Optional

from .response_converter import THINKING_CLOSE_MARKER, THINKING_OPEN_MARKER, new_completion_id
from .sse_parser import SSELineBuffer, parse_data_line
from .stream_events import StreamEventType

logger = logging.getLogger(__name__)

REDACTED_MARKER = "\n[REDACTED]\n"
DONE_SENTINEL = b"data: [DONE]\n\n"


def format_error_notice(message: str) -> str:
    return f"\n[Error: {message}]\n"


@dataclass
class StreamTranscodeState:
    """Per-stream transcoding state.

    ``inside_reasoning_block`` drives marker placement; the text
    accumulators and counters exist for the end-of-stream summary only.
    """
    inside_reasoning_block: bool = False
    line_buffer: SSELineBuffer = field(default_factory=SSELineBuffer)
    reasoning_text: str = ""
    body_text: str = ""
    model: Optional[str] = None
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    stop_reason: Optional[str] = None
    finished: bool = False
    chunks_emitted: int = 0
    started_at: float = field(default_factory=time.monotonic)
    first_chunk_at: Optional[float] = None


class AnthropicStreamTranscoder:
    """Synchronous state machine turning Anthropic SSE bytes into OpenAI SSE bytes.

    ``feed`` is called once per upstream read and ``finish`` once when the
    upstream ends. Both return the encoded output frames to send, in order.
    Once ``message_stop`` has been handled the terminal sentinel is out and
    all further input is ignored.
    """

    def __init__(self, model: Optional[str] = None, request_id: str = "-"):
        self.request_id = request_id
        self.completion_id = new_completion_id()
        self.created = int(time.time())
        self.state = StreamTranscodeState(model=model)
        self._handlers: Dict[StreamEventType, Callable[[Dict[str, Any]], List[bytes]]] = {
            StreamEventType.MESSAGE_START: self._on_message_start,
            StreamEventType.CONTENT_BLOCK_START: self._on_content_block_start,
            StreamEventType.CONTENT_BLOCK_DELTA: self._on_content_block_delta,
            StreamEventType.CONTENT_BLOCK_STOP: self._ignore,
            StreamEventType.MESSAGE_DELTA: self._on_message_delta,
            StreamEventType.MESSAGE_STOP: self._on_message_stop,
            StreamEventType.PING: self._ignore,
            StreamEventType.ERROR: self._on_error,
        }

    def feed(self, chunk: bytes) -> List[bytes]:
        """Process one upstream read."""
        if self.state.finished or not chunk:
            return []
        if self.state.first_chunk_at is None:
            self.state.first_chunk_at = time.monotonic()

        output: List[bytes] = []
        for line in self.state.line_buffer.feed(chunk):
            output.extend(self._process_line(line))
            if self.state.finished:
                break
        return output

    def finish(self) -> List[bytes]:
        """Terminate the output after the upstream closed.

        A reasoning block still open at this point is closed before the
        sentinel so the client never sees an unterminated marker.
        """
        if self.state.finished:
            return []

        output: List[bytes] = []
        for line in self.state.line_buffer.flush():
            output.extend(self._process_line(line))
            if self.state.finished:
                return output

        if self.state.inside_reasoning_block:
            logger.warning(f"[{self.request_id}] Upstream ended inside a reasoning block, closing it")
            output.extend(self._close_reasoning())
        output.append(self._terminate())
        return output

    def fail(self, message: str) -> List[bytes]:
        """Report a read failure inline and terminate the output."""
        if self.state.finished:
            return []
        output = self._on_error({"error": {"message": message}})
        output.append(self._terminate())
        return output

    def log_summary(self) -> None:
        state = self.state
        elapsed_ms = int((time.monotonic() - state.started_at) * 1000)
        ttfb_ms = int((state.first_chunk_at - state.started_at) * 1000) if state.first_chunk_at else 0
        logger.info(
            f"[{self.request_id}] Stream complete: {elapsed_ms}ms total, first chunk after {ttfb_ms}ms, "
            f"body {len(state.body_text)} chars, reasoning {len(state.reasoning_text)} chars, "
            f"input_tokens={state.input_tokens} output_tokens={state.output_tokens} "
            f"stop_reason={state.stop_reason} chunks={state.chunks_emitted}"
        )
        if state.reasoning_text:
            logger.debug(f"[{self.request_id}] Reasoning content:\n{state.reasoning_text}")

    def _process_line(self, line: str) -> List[bytes]:
        payload = parse_data_line(line)
        if not payload:
            return []
        try:
            event = json.loads(payload)
        except json.JSONDecodeError:
            logger.debug(f"[{self.request_id}] Skipping malformed SSE data: {payload[:200]}")
            return []
        if not isinstance(event, dict):
            return []

        event_type = StreamEventType.parse(event.get("type"))
        if event_type is None:
            logger.debug(f"[{self.request_id}] Ignoring unknown stream event type: {event.get('type')!r}")
            return []
        return self._handlers[event_type](event)

    def _content_chunk(self, text: str) -> bytes:
        payload = {
            "id": self.completion_id,
            "object": "chat.completion.chunk",
            "created": self.created,
            "model": self.state.model,
            "choices": [
                {
                    "index": 0,
                    "delta": {"content": text},
                    "finish_reason": None,
                }
            ],
        }
        self.state.chunks_emitted += 1
        return f"data: {json.dumps(payload)}\n\n".encode("utf-8")

    def _open_reasoning(self) -> List[bytes]:
        if self.state.inside_reasoning_block:
            return []
        self.state.inside_reasoning_block = True
        return [self._content_chunk(THINKING_OPEN_MARKER)]

    def _close_reasoning(self) -> List[bytes]:
        if not self.state.inside_reasoning_block:
            return []
        self.state.inside_reasoning_block = False
        return [self._content_chunk(THINKING_CLOSE_MARKER)]

    def _redacted(self) -> List[bytes]:
        logger.warning(f"[{self.request_id}] Upstream redacted part of the reasoning")
        return self._open_reasoning() + [self._content_chunk(REDACTED_MARKER)]

    def _terminate(self) -> bytes:
        self.state.finished = True
        return DONE_SENTINEL

    def _ignore(self, event: Dict[str, Any]) -> List[bytes]:
        return []

    def _on_message_start(self, event: Dict[str, Any]) -> List[bytes]:
        message = event.get("message") or {}
        if isinstance(message, dict):
            if message.get("model"):
                self.state.model = message["model"]
            usage = message.get("usage") or {}
            if isinstance(usage, dict) and usage.get("input_tokens") is not None:
                self.state.input_tokens = usage["input_tokens"]
        logger.debug(f"[{self.request_id}] message_start: model={self.state.model} input_tokens={self.state.input_tokens}")
        return []

    def _on_message_delta(self, event: Dict[str, Any]) -> List[bytes]:
        usage = event.get("usage") or {}
        if isinstance(usage, dict) and usage.get("output_tokens") is not None:
            self.state.output_tokens = usage["output_tokens"]
        delta = event.get("delta") or {}
        if isinstance(delta, dict) and delta.get("stop_reason"):
            self.state.stop_reason = delta["stop_reason"]
        return []

    def _on_content_block_start(self, event: Dict[str, Any]) -> List[bytes]:
        block = event.get("content_block") or {}
        block_type = block.get("type") if isinstance(block, dict) else None

        if block_type == "thinking":
            return self._open_reasoning()
        if block_type == "redacted_thinking":
            return self._redacted()
        if block_type == "text":
            return self._close_reasoning()
        return []

    def _on_content_block_delta(self, event: Dict[str, Any]) -> List[bytes]:
        delta = event.get("delta") or {}
        if not isinstance(delta, dict):
            return []
        delta_type = delta.get("type")

        if delta_type == "thinking_delta":
            thinking = delta.get("thinking")
            if not isinstance(thinking, str) or not thinking:
                return []
            self.state.reasoning_text += thinking
            return [self._content_chunk(thinking)]
        if delta_type == "redacted_thinking":
            return self._redacted()

        text = delta.get("text")
        if isinstance(text, str) and text:
            self.state.body_text += text
            return [self._content_chunk(text)]
        return []

    def _on_message_stop(self, event: Dict[str, Any]) -> List[bytes]:
        output = self._close_reasoning()
        output.append(self._terminate())
        return output

    def _on_error(self, event: Dict[str, Any]) -> List[bytes]:
        error = event.get("error")
        if isinstance(error, dict):
            message = error.get("message") or "Unknown error"
        elif isinstance(error, str) and error:
            message = error
        else:
            message = "Unknown error"
        logger.error(f"[{self.request_id}] Upstream stream error event: {message}")

        output = self._close_reasoning()
        output.append(self._content_chunk(format_error_notice(message)))
        return output


async def convert_anthropic_stream_to_openai(
    anthropic_stream: AsyncIterator[bytes],
    model: Optional[str] = None,
    request_id: str = "-",
) -> AsyncIterator[bytes]:
    """
    Convert Anthropic SSE stream to OpenAI chat completion stream format.

    Reads from ``anthropic_stream`` only when the consumer pulls the next
    chunk, and stops reading once ``message_stop`` has been handled.

    Args:
        anthropic_stream: Raw upstream SSE bytes
        model: Model name used until the upstream reports its own
        request_id: Request ID for logging

    Yields:
        OpenAI-formatted SSE frames, ending with ``data: [DONE]``
    """
    transcoder = AnthropicStreamTranscoder(model=model, request_id=request_id)
    try:
        try:
            async for chunk in anthropic_stream:
                for frame in transcoder.feed(chunk):
                    yield frame
                if transcoder.state.finished:
                    break
        except Exception as e:
            logger.error(f"[{request_id}] Error reading upstream stream: {e}")
            for frame in transcoder.fail(str(e) or type(e).__name__):
                yield frame

        for frame in transcoder.finish():
            yield frame
    finally:
        transcoder.log_summary()
