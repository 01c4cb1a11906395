import pytest
from pydantic import ValidationError

from messages_api.models import AnthropicMessage, AnthropicMessageRequest, TextBlock
from openai_compat.models import ChatMessage
from openai_compat.request_converter import NormalizationParams, convert_openai_request_to_anthropic

MESSAGES = [
    ChatMessage(role="system", content="Be brief."),
    ChatMessage(role="assistant", content="Hi there"),
    ChatMessage(role="user", content="Hello"),
]


def test_defaults_and_system_block():
    request = convert_openai_request_to_anthropic(MESSAGES, "claude-sonnet-4.5", NormalizationParams())
    payload = request.to_payload()
    assert payload["model"] == "claude-sonnet-4.5"
    assert payload["max_tokens"] == 8192
    assert payload["system"] == [{"type": "text", "text": "Be brief."}]
    assert payload["messages"][0] == {"role": "user", "content": [{"type": "text", "text": "Start"}]}
    assert "thinking" not in payload
    assert "stream" not in payload


def test_temperature_wins_over_top_p():
    params = NormalizationParams.from_request({"temperature": 0.5, "top_p": 0.9})
    payload = convert_openai_request_to_anthropic(MESSAGES, "m", params).to_payload()
    assert payload["temperature"] == 0.5
    assert "top_p" not in payload


def test_sampling_parameters_are_clamped():
    payload = convert_openai_request_to_anthropic(
        MESSAGES, "m", NormalizationParams(temperature=1.7)
    ).to_payload()
    assert payload["temperature"] == 1.0

    payload = convert_openai_request_to_anthropic(
        MESSAGES, "m", NormalizationParams(top_p=-0.2)
    ).to_payload()
    assert payload["top_p"] == 0.0
    assert "temperature" not in payload


@pytest.mark.parametrize("max_tokens, expected", [(4096, 14096), (10000, 14096), (20000, 20000)])
def test_thinking_raises_max_tokens_above_budget(max_tokens, expected):
    params = NormalizationParams(max_tokens=max_tokens, thinking=True, thinking_budget=10000, temperature=0.7)
    payload = convert_openai_request_to_anthropic(MESSAGES, "m", params).to_payload()
    assert payload["max_tokens"] == expected
    assert payload["thinking"] == {"type": "enabled", "budget_tokens": 10000}
    assert "temperature" not in payload
    assert "top_p" not in payload


def test_adaptive_thinking_has_no_budget():
    params = NormalizationParams(max_tokens=4096, thinking=True, adaptive_thinking=True, top_p=0.3)
    payload = convert_openai_request_to_anthropic(MESSAGES, "m", params).to_payload()
    assert payload["thinking"] == {"type": "adaptive"}
    assert payload["max_tokens"] == 4096
    assert "top_p" not in payload


def test_stream_flag_is_forwarded():
    params = NormalizationParams.from_request({"stream": True, "max_tokens": 100})
    payload = convert_openai_request_to_anthropic(MESSAGES, "m", params).to_payload()
    assert payload["stream"] is True
    assert payload["max_tokens"] == 100


def test_from_request_ignores_invalid_values():
    params = NormalizationParams.from_request({"max_tokens": 0, "temperature": "hot", "stream": "yes"})
    assert params.max_tokens == 8192
    assert params.temperature is None
    assert params.stream is None


def test_request_model_rejects_protocol_violations():
    user = AnthropicMessage(role="user", content=[TextBlock(text="u")])
    assistant = AnthropicMessage(role="assistant", content=[TextBlock(text="a")])
    with pytest.raises(ValidationError):
        AnthropicMessageRequest(model="m", messages=[], max_tokens=1)
    with pytest.raises(ValidationError):
        AnthropicMessageRequest(model="m", messages=[user, assistant], max_tokens=1)
    with pytest.raises(ValidationError):
        AnthropicMessageRequest(model="m", messages=[user, user], max_tokens=1)
    with pytest.raises(ValidationError):
        AnthropicMessageRequest(model="m", messages=[user], max_tokens=1, temperature=0.1, top_p=0.1)


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_sampling_values_are_dropped(value):
    params = NormalizationParams.from_request({"temperature": value, "top_p": value})
    assert params.temperature is None
    assert params.top_p is None
    payload = convert_openai_request_to_anthropic(MESSAGES, "m", params).to_payload()
    assert "temperature" not in payload
    assert "top_p" not in payload


def test_nan_passed_directly_is_not_sent():
    payload = convert_openai_request_to_anthropic(
        MESSAGES, "m", NormalizationParams(temperature=float("nan"), top_p=0.4)
    ).to_payload()
    assert "temperature" not in payload
    assert payload["top_p"] == 0.4
