"""
Server-Sent Events (SSE) line buffering for streaming responses.
"""
import codecs
from typing import List


class SSELineBuffer:
    """Incremental splitter of an event-stream byte feed into complete lines.

    UTF-8 sequences and lines may be split at any byte boundary across
    reads; the incomplete tail is kept until the next feed.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self.pending = ""

    def feed(self, chunk: bytes) -> List[str]:
        """Consume raw bytes and return the lines completed by them."""
        if not chunk:
            return []
        self.pending += self._decoder.decode(chunk)
        lines = self.pending.split("\n")
        self.pending = lines.pop()
        # Trim CR from Windows-style endings
        return [line[:-1] if line.endswith("\r") else line for line in lines]

    def flush(self) -> List[str]:
        """Return whatever remains buffered (used at stream end)."""
        self.pending += self._decoder.decode(b"", final=True)
        remainder, self.pending = self.pending, ""
        return [remainder] if remainder else []


def parse_data_line(line: str) -> str:
    """Payload of a ``data: `` line, or an empty string for any other line"""
    if not line.startswith("data: "):
        return ""
    return line[6:].strip()
