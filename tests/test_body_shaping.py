from config.interceptor import DestinationMode
from proxy.body_shaping import (
    build_anthropic_request,
    shape_openai_body,
    shape_passthrough_body,
    strip_transport_fields,
)
from tests.helpers import make_config

CLIENT_BODY = {
    "model": "gpt-4.1",
    "messages": [{"role": "user", "content": "hi"}],
    "custom_url": "https://example.invalid",
    "api_key_custom": "gho_secret",
    "reverse_proxy": "https://proxy.invalid",
    "proxy_password": "pw",
    "chat_completion_source": "custom",
    "user_name": "User",
    "char_name": "Bot",
    "group_names": [],
    "request_image_resolution": "high",
    "request_image_aspect_ratio": "1:1",
    "include_reasoning": True,
    "reasoning_effort": "medium",
    "type": "quiet",
    "seed": None,
}


def test_transport_fields_and_nones_always_removed():
    stripped = strip_transport_fields(CLIENT_BODY)
    for name in ("custom_url", "api_key_custom", "reverse_proxy", "proxy_password", "seed"):
        assert name not in stripped
    assert stripped["model"] == "gpt-4.1"


def test_passthrough_strips_client_fields_and_empty_messages():
    body = dict(strip_transport_fields(CLIENT_BODY))
    body["messages"] = [
        {"role": "system", "content": "sys"},
        {"role": "assistant", "content": "   "},
        {"role": "user", "content": [{"type": "text", "text": ""}]},
        {"role": "user", "content": [{"type": "text", "text": "hello"}]},
    ]
    shaped = shape_passthrough_body(body)
    for name in ("chat_completion_source", "user_name", "char_name", "group_names", "type",
                 "request_image_resolution", "request_image_aspect_ratio", "include_reasoning", "reasoning_effort"):
        assert name not in shaped
    assert [m["role"] for m in shaped["messages"]] == ["system", "user"]


def test_openai_mode_keeps_image_hints_and_drops_top_p():
    body = dict(strip_transport_fields(CLIENT_BODY), temperature=0.4, top_p=0.8)
    shaped = shape_openai_body(body, make_config(mode=DestinationMode.OPENAI))
    assert shaped["request_image_resolution"] == "high"
    assert shaped["request_image_aspect_ratio"] == "1:1"
    assert "user_name" not in shaped
    assert shaped["temperature"] == 0.4
    assert "top_p" not in shaped


def test_openai_mode_prefill_trim_and_last_user():
    messages = [
        {"role": "user", "content": "q"},
        {"role": "assistant", "content": "draft  \n"},
        {"role": "system", "content": "note"},
        {"role": "assistant", "content": "prefill"},
        {"role": "assistant", "content": "more prefill"},
    ]
    shaped = shape_openai_body({"messages": messages}, make_config(mode=DestinationMode.OPENAI))
    assert shaped["messages"] == [
        {"role": "user", "content": "q"},
        {"role": "assistant", "content": "draft"},
        {"role": "user", "content": "note"},
    ]
    # caller's list untouched
    assert messages[1]["content"] == "draft  \n"
    assert len(messages) == 5


def test_openai_mode_prefill_removal_keeps_one_message():
    shaped = shape_openai_body(
        {"messages": [{"role": "assistant", "content": "a"}, {"role": "assistant", "content": "b"}]},
        make_config(mode=DestinationMode.OPENAI, force_last_user=False),
    )
    assert shaped["messages"] == [{"role": "assistant", "content": "a"}]


def test_openai_mode_toggles_off_leave_messages_alone():
    messages = [{"role": "user", "content": "q"}, {"role": "assistant", "content": "a  "}]
    shaped = shape_openai_body(
        {"messages": messages},
        make_config(mode=DestinationMode.OPENAI, remove_prefill=False, trim_assistant=False, force_last_user=False),
    )
    assert shaped["messages"] == messages


def test_anthropic_request_uses_defaults_and_drops_top_p():
    request = build_anthropic_request(
        {"messages": [{"role": "user", "content": "hi"}], "temperature": 0.5, "top_p": 0.9},
        make_config(),
    )
    payload = request.to_payload()
    assert payload["model"] == "claude-sonnet-4.5"
    assert payload["max_tokens"] == 8192
    assert payload["temperature"] == 0.5
    assert "top_p" not in payload


def test_anthropic_request_with_thinking_from_config():
    request = build_anthropic_request(
        {"model": "claude-opus-4.5", "messages": [{"role": "user", "content": "hi"}], "max_tokens": 4096},
        make_config(thinking_enabled=True, thinking_budget=10000),
    )
    payload = request.to_payload()
    assert payload["model"] == "claude-opus-4.5"
    assert payload["max_tokens"] == 14096
    assert payload["thinking"] == {"type": "enabled", "budget_tokens": 10000}
