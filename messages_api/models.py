"""Pydantic models for the Anthropic Messages API request"""

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field, model_validator


class TextBlock(BaseModel):
    """Text content block"""
    type: Literal["text"] = "text"
    text: str


class AnthropicMessage(BaseModel):
    """One conversation turn"""
    role: Literal["user", "assistant"]
    content: List[TextBlock]

    @property
    def text(self) -> str:
        return "".join(block.text for block in self.content)


class ThinkingParameter(BaseModel):
    """Anthropic extended thinking parameter"""
    type: Literal["enabled", "adaptive"] = "enabled"
    budget_tokens: Optional[int] = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _budget_matches_type(self) -> "ThinkingParameter":
        if self.type == "enabled" and self.budget_tokens is None:
            raise ValueError("budget_tokens is required when thinking is enabled")
        if self.type == "adaptive" and self.budget_tokens is not None:
            raise ValueError("budget_tokens is not allowed with adaptive thinking")
        return self


class AnthropicMessageRequest(BaseModel):
    """Anthropic Messages API request

    Construction enforces what the upstream accepts: a non-empty message
    list that starts and ends with ``user`` and strictly alternates, and
    no sampling parameters that conflict with each other or with thinking.
    """
    model: str
    messages: List[AnthropicMessage]
    max_tokens: int = Field(gt=0)
    system: Optional[List[TextBlock]] = None
    temperature: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    stream: Optional[bool] = None
    thinking: Optional[ThinkingParameter] = None

    @model_validator(mode="after")
    def _check_protocol_constraints(self) -> "AnthropicMessageRequest":
        if not self.messages:
            raise ValueError("messages must not be empty")
        if self.messages[0].role != "user":
            raise ValueError("first message must have role 'user'")
        if self.messages[-1].role != "user":
            raise ValueError("last message must have role 'user'")
        for previous, current in zip(self.messages, self.messages[1:]):
            if previous.role == current.role:
                raise ValueError(f"adjacent messages share role '{current.role}'")
        if self.temperature is not None and self.top_p is not None:
            raise ValueError("temperature and top_p cannot both be set")
        if self.thinking is not None and (self.temperature is not None or self.top_p is not None):
            raise ValueError("temperature/top_p cannot be set when thinking is enabled")
        return self

    def to_payload(self) -> Dict[str, Any]:
        """JSON body for the upstream call, unset fields omitted"""
        return self.model_dump(exclude_none=True)
