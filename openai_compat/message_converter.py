"""
Message conversion from OpenAI chat history to Anthropic turns.
"""
import logging
from typing import List, Optional, Sequence, Tuple

from messages_api.models import AnthropicMessage, TextBlock
from .models import ChatMessage

logger = logging.getLogger(__name__)

START_PLACEHOLDER = "Start"
CONTINUE_PLACEHOLDER = "Continue"
SYSTEM_REINJECT_PREFIX = "system: "
TURN_SEPARATOR = "\n\n"


def _turn(role: str, text: str) -> AnthropicMessage:
    return AnthropicMessage(role=role, content=[TextBlock(text=text)])


def _append_or_merge(turns: List[AnthropicMessage], role: str, text: str) -> None:
    """Append a turn, merging into the previous one when roles match"""
    if turns and turns[-1].role == role:
        turns[-1].content[0].text += TURN_SEPARATOR + text
    else:
        turns.append(_turn(role, text))


def extract_system_prefix(messages: Sequence[ChatMessage]) -> Tuple[str, List[ChatMessage]]:
    """Split leading messages off into a system prompt

    Everything before the first assistant message becomes system text. With
    no assistant message, all but the last message does.

    Returns:
        (system_text, remaining_messages)
    """
    split_index = next((i for i, msg in enumerate(messages) if msg.role == "assistant"), None)
    if split_index is None:
        split_index = max(0, len(messages) - 1)

    prefix_texts = [msg.text for msg in messages[:split_index]]
    system_text = TURN_SEPARATOR.join(text for text in prefix_texts if text)
    return system_text, list(messages[split_index:])


def _merge_role_runs(messages: Sequence[ChatMessage]) -> List[AnthropicMessage]:
    turns: List[AnthropicMessage] = []
    for msg in messages:
        text = msg.text
        if not text:
            continue
        if msg.role == "system":
            # Mid-conversation system notes travel as user text
            _append_or_merge(turns, "user", SYSTEM_REINJECT_PREFIX + text)
        elif msg.role in ("user", "assistant"):
            _append_or_merge(turns, msg.role, text)
        else:
            logger.debug(f"[MESSAGE_CONVERSION] Dropping message with unsupported role '{msg.role}'")
    return turns


def _apply_end_guarantees(turns: List[AnthropicMessage]) -> None:
    if not turns:
        turns.append(_turn("user", START_PLACEHOLDER))
    if turns[-1].role != "user":
        turns.append(_turn("user", CONTINUE_PLACEHOLDER))


def _revalidate(turns: List[AnthropicMessage]) -> List[AnthropicMessage]:
    validated: List[AnthropicMessage] = []
    for turn in turns:
        text = turn.content[0].text.strip() if turn.content else ""
        if not text:
            continue
        _append_or_merge(validated, turn.role, text)
    _apply_end_guarantees(validated)
    return validated


def normalize_messages(
    openai_messages: Sequence[ChatMessage],
) -> Tuple[List[AnthropicMessage], Optional[str]]:
    """
    Convert OpenAI messages to Anthropic turns with strict role alternation.

    1. Messages before the first assistant message become the system prompt
    2. A "Start" user turn is prepended when the history does not open with user
    3. Consecutive same-role messages merge; system messages found later are
       re-injected as "system: ..." user text; empty messages are dropped
    4. An empty result becomes a single "Start" user turn
    5. A "Continue" user turn is appended when the history ends on assistant
    6. A final pass drops blanks and re-merges neighbours, then repeats 4 and 5

    Returns:
        tuple: (anthropic_messages, system_text or None)
    """
    logger.debug(f"[MESSAGE_CONVERSION] Converting {len(openai_messages)} OpenAI messages to Anthropic format")
    logger.debug(
        "[MESSAGE_CONVERSION] Roles before conversion: "
        + " ".join(f"[{i}]{msg.role}" for i, msg in enumerate(openai_messages))
    )

    system_text, working = extract_system_prefix(openai_messages)

    if not working or working[0].role != "user":
        working.insert(0, ChatMessage(role="user", content=START_PLACEHOLDER))

    turns = _merge_role_runs(working)
    _apply_end_guarantees(turns)
    turns = _revalidate(turns)

    logger.debug(
        f"[MESSAGE_CONVERSION] Final result: {len(turns)} Anthropic messages, "
        f"system {'present' if system_text else 'absent'} ({len(system_text)} chars)"
    )
    return turns, system_text or None
