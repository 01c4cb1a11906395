import pytest

from openai_compat.message_converter import extract_system_prefix, normalize_messages
from openai_compat.models import ChatMessage


def _msgs(*pairs):
    return [ChatMessage(role=role, content=content) for role, content in pairs]


def _shape(turns):
    return [(t.role, t.text) for t in turns]


def _assert_alternation(turns):
    assert turns
    assert turns[0].role == "user"
    assert turns[-1].role == "user"
    for previous, current in zip(turns, turns[1:]):
        assert previous.role != current.role


@pytest.mark.parametrize(
    "pairs",
    [
        [],
        [("user", "hi")],
        [("assistant", "hello")],
        [("system", "sys"), ("system", "more")],
        [("system", "s"), ("user", "u"), ("assistant", "a")],
        [("user", "a"), ("user", "b"), ("assistant", "c"), ("assistant", "d")],
        [("assistant", "a"), ("system", "note"), ("assistant", "b")],
        [("user", "  "), ("assistant", ""), ("user", "\n")],
        [("system", "s"), ("assistant", "a"), ("user", "u"), ("system", "late"), ("assistant", "z")],
        [("tool", "x"), ("assistant", "a")],
    ],
)
def test_normalized_turns_always_alternate_starting_and_ending_with_user(pairs):
    turns, _ = normalize_messages(_msgs(*pairs))
    _assert_alternation(turns)
    assert all(t.text.strip() for t in turns)


def test_empty_history_becomes_single_start_turn():
    turns, system = normalize_messages([])
    assert _shape(turns) == [("user", "Start")]
    assert system is None


def test_messages_before_first_assistant_become_system_text():
    turns, system = normalize_messages(_msgs(
        ("system", "You are helpful."),
        ("user", "  "),
        ("user", "Character card"),
        ("assistant", "Hello!"),
        ("user", "Hi"),
    ))
    assert system == "You are helpful.\n\nCharacter card"
    assert _shape(turns) == [("user", "Start"), ("assistant", "Hello!"), ("user", "Hi")]


def test_without_assistant_all_but_last_message_is_system():
    system, remaining = extract_system_prefix(_msgs(("system", "a"), ("user", "b"), ("user", "c")))
    assert system == "a\n\nb"
    assert [m.text for m in remaining] == ["c"]


def test_same_role_runs_merge_with_blank_line():
    turns, _ = normalize_messages(_msgs(
        ("assistant", "a1"),
        ("assistant", "a2"),
        ("user", "u1"),
        ("user", "u2"),
    ))
    assert _shape(turns) == [
        ("user", "Start"),
        ("assistant", "a1\n\na2"),
        ("user", "u1\n\nu2"),
    ]


def test_late_system_message_is_reinjected_as_user_text():
    turns, _ = normalize_messages(_msgs(
        ("assistant", "a"),
        ("user", "u"),
        ("system", "note"),
        ("assistant", "b"),
        ("system", "tail"),
    ))
    assert _shape(turns) == [
        ("user", "Start"),
        ("assistant", "a"),
        ("user", "u\n\nsystem: note"),
        ("assistant", "b"),
        ("user", "system: tail"),
    ]


def test_trailing_assistant_gets_continue_turn():
    turns, _ = normalize_messages(_msgs(("user", "q"), ("assistant", "a")))
    assert _shape(turns)[-1] == ("user", "Continue")


def test_block_content_concatenates_text_blocks_only():
    message = ChatMessage(role="user", content=[
        {"type": "text", "text": " Hello "},
        {"type": "image_url", "image_url": {"url": "data:..."}},
        {"type": "text", "text": "world "},
    ])
    assert message.text == "Hello world"


def test_coerce_list_skips_entries_without_role():
    messages = ChatMessage.coerce_list([{"content": "x"}, {"role": "user", "content": "y"}, "junk"])
    assert [(m.role, m.text) for m in messages] == [("user", "y")]
