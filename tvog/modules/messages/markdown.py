"""
Split assistant markdown into renderable segments.

Fenced code blocks become ``code`` segments (language defaults to ``code``),
inline ``![alt](url)`` images become ``image`` segments, and everything else
stays ``text`` in its original order.
"""
import re
from typing import List

from tvog.modules.messages.schemas import Segment

CODE_BLOCK_RE = re.compile(r"```(\w+)?\n([\s\S]*?)```")
IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(([^)\s]+)\)")

DEFAULT_CODE_LANGUAGE = "code"


def _split_text(text: str) -> List[Segment]:
    segments: List[Segment] = []
    last_index = 0
    for match in IMAGE_RE.finditer(text):
        if match.start() > last_index:
            segments.append(Segment(type="text", content=text[last_index:match.start()]))
        segments.append(Segment(type="image", alt=match.group(1), url=match.group(2)))
        last_index = match.end()
    if last_index < len(text):
        segments.append(Segment(type="text", content=text[last_index:]))
    return segments


def split_segments(content: str) -> List[Segment]:
    segments: List[Segment] = []
    last_index = 0
    for match in CODE_BLOCK_RE.finditer(content):
        if match.start() > last_index:
            segments.extend(_split_text(content[last_index:match.start()]))
        segments.append(Segment(
            type="code",
            language=match.group(1) or DEFAULT_CODE_LANGUAGE,
            content=match.group(2),
        ))
        last_index = match.end()

    if last_index < len(content):
        segments.extend(_split_text(content[last_index:]))

    if not segments:
        return [Segment(type="text", content=content)]
    return segments
