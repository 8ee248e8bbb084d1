import pytest

from streamchat.models.chat import MODELS, ChatRequest
from streamchat.services.validation import ChatRequestError, validate_chat_request

MODEL = MODELS[2]


def _error(body):
    with pytest.raises(ChatRequestError) as exc:
        validate_chat_request(body)
    return str(exc.value)


def test_valid_request_defaults_system():
    req = validate_chat_request({"model": MODEL, "messages": [{"role": "user", "content": "Test"}]})
    assert isinstance(req, ChatRequest)
    assert req.system == ""
    assert req.messages[0].role == "user"
    assert req.messages[0].content == "Test"


def test_valid_request_keeps_system_and_order():
    body = {
        "model": MODEL,
        "system": "Be brief.",
        "messages": [
            {"role": "user", "content": "a"},
            {"role": "assistant", "content": "b"},
            {"role": "user", "content": "c"},
        ],
    }
    req = validate_chat_request(body)
    assert req.system == "Be brief."
    assert [m.content for m in req.messages] == ["a", "b", "c"]


def test_empty_transcript_is_accepted():
    assert validate_chat_request({"model": MODEL, "messages": []}).messages == []


@pytest.mark.parametrize("body", [None, [], "text", 3, True])
def test_body_must_be_object(body):
    assert "JSON object" in _error(body)


@pytest.mark.parametrize("model", [None, "", "gpt-4", 42, ["claude"]])
def test_model_must_be_supported(model):
    body = {"messages": [{"role": "user", "content": "hi"}]}
    if model is not None:
        body["model"] = model
    assert _error(body).startswith("model must be one of")


@pytest.mark.parametrize("system", [None, 1, ["x"], {"text": "x"}])
def test_system_must_be_string(system):
    assert _error({"model": MODEL, "system": system, "messages": []}) == "system must be a string"


@pytest.mark.parametrize("messages", [None, "hi", {"role": "user", "content": "hi"}, 5])
def test_messages_must_be_array(messages):
    body = {"model": MODEL}
    if messages is not None:
        body["messages"] = messages
    assert _error(body) == "messages must be an array"


def test_message_shape_reports_first_bad_index():
    body = {"model": MODEL, "messages": [{"role": "user", "content": "ok"}, "nope", {"role": "bot"}]}
    assert _error(body) == "messages[1] must be an object"


@pytest.mark.parametrize("role", ["system", "bot", None, ""])
def test_message_role_is_user_or_assistant(role):
    body = {"model": MODEL, "messages": [{"role": role, "content": "x"}]}
    assert _error(body) == "messages[0].role must be 'user' or 'assistant'"


@pytest.mark.parametrize("content", [None, 1, ["x"], {"type": "text"}])
def test_message_content_is_string(content):
    body = {"model": MODEL, "messages": [{"role": "user", "content": content}]}
    assert _error(body) == "messages[0].content must be a string"


def test_checks_run_in_order():
    # bad model and bad messages: model is reported
    assert _error({"model": "nope", "messages": "nope"}).startswith("model")
    # bad system and bad messages: system is reported
    assert _error({"model": MODEL, "system": 1, "messages": "nope"}).startswith("system")
