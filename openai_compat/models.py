"""
Pydantic models for OpenAI chat messages as the client sends them.
"""
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict


class ChatMessage(BaseModel):
    """Chat message

    Content is a string or a list of content blocks; only ``text`` blocks
    carry text for conversion purposes.
    """
    model_config = ConfigDict(extra="allow")

    role: str
    content: Optional[Union[str, List[Dict[str, Any]]]] = None

    @property
    def text(self) -> str:
        """Text content, trimmed"""
        return extract_text(self.content).strip()

    @classmethod
    def coerce_list(cls, raw_messages: Optional[Iterable[Any]]) -> List["ChatMessage"]:
        """Build messages from raw dicts, skipping entries without a role"""
        messages: List[ChatMessage] = []
        for raw in raw_messages or []:
            if isinstance(raw, ChatMessage):
                messages.append(raw)
            elif isinstance(raw, dict) and isinstance(raw.get("role"), str):
                content = raw.get("content")
                if not isinstance(content, (str, list)):
                    content = None
                else:
                    content = content if isinstance(content, str) else [b for b in content if isinstance(b, dict)]
                messages.append(cls(role=raw["role"], content=content))
        return messages


def extract_text(content: Any) -> str:
    """Concatenate the text of string or block-list content (untrimmed)"""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, dict) and isinstance(block.get("text"), str):
                parts.append(block["text"])
        return "".join(parts)
    return ""
