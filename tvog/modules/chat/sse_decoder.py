"""
Incremental decoder for OpenAI-compatible chat completion streams.

The body is a sequence of ``data: <json>`` lines terminated by
``data: [DONE]``. Chunks may split lines, JSON payloads and UTF-8
sequences anywhere, so bytes are decoded incrementally and only complete
lines are interpreted.
"""
import codecs
import json
from typing import Any, AsyncIterable, AsyncIterator, List, Optional, Union

DATA_PREFIX = "data: "
DONE_MARKER = "[DONE]"


def delta_content(payload: Any) -> Optional[str]:
    """``choices[0].delta.content`` of a stream payload, if present"""
    try:
        return payload["choices"][0]["delta"].get("content")
    except (KeyError, IndexError, TypeError, AttributeError):
        return None


class SSEDecoder:
    def __init__(self):
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self.done = False

    def feed(self, chunk: Union[bytes, str]) -> List[str]:
        """Add a chunk and return the content deltas it completed"""
        if self.done:
            return []
        if isinstance(chunk, bytes):
            chunk = self._decoder.decode(chunk)
        self._buffer += chunk
        return self._drain()

    def _drain(self) -> List[str]:
        deltas: List[str] = []
        while not self.done:
            newline_index = self._buffer.find("\n")
            if newline_index == -1:
                break
            line = self._buffer[:newline_index]
            self._buffer = self._buffer[newline_index + 1:]

            payload = self._payload(line)
            if payload is None:
                continue
            if payload == DONE_MARKER:
                self.done = True
                break
            try:
                parsed = json.loads(payload)
            except ValueError:
                # Incomplete JSON: put the line back and wait for more data.
                self._buffer = line + "\n" + self._buffer
                break
            content = delta_content(parsed)
            if content:
                deltas.append(content)
        return deltas

    def flush(self) -> List[str]:
        """Interpret whatever is left once the body has ended"""
        if self.done:
            return []
        self._buffer += self._decoder.decode(b"", final=True)
        remaining, self._buffer = self._buffer, ""
        deltas: List[str] = []
        for line in remaining.split("\n"):
            payload = self._payload(line)
            if payload is None:
                continue
            if payload == DONE_MARKER:
                self.done = True
                break
            try:
                parsed = json.loads(payload)
            except ValueError:
                continue
            content = delta_content(parsed)
            if content:
                deltas.append(content)
        self.done = True
        return deltas

    @staticmethod
    def _payload(line: str) -> Optional[str]:
        if line.endswith("\r"):
            line = line[:-1]
        if line.startswith(":") or line.strip() == "":
            return None
        if not line.startswith(DATA_PREFIX):
            return None
        return line[len(DATA_PREFIX):].strip()


async def iter_sse_content(chunks: AsyncIterable[Union[bytes, str]]) -> AsyncIterator[str]:
    """Yield assistant text deltas from a streamed body"""
    decoder = SSEDecoder()
    async for chunk in chunks:
        for content in decoder.feed(chunk):
            yield content
        if decoder.done:
            return
    for content in decoder.flush():
        yield content
