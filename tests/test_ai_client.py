from types import SimpleNamespace
from unittest import mock

import pytest
from openai import OpenAIError

from hiredready.ai.client import GenerativeClient
from hiredready.ai.feedback import generate_feedback
from hiredready.errors import UpstreamFormatError, UpstreamServiceError
from hiredready.judge.runner import ExecutionResult


def client_returning(**create_kwargs):
    client = GenerativeClient("test-key", model="test-model")
    client._client = mock.Mock()
    client._client.chat.completions.create.configure_mock(**create_kwargs)
    return client


def completion(*contents):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=c)) for c in contents])


def test_complete_returns_first_choice():
    client = client_returning(return_value=completion('{"a": 1}', "ignored"))
    assert client.complete("hi") == '{"a": 1}'
    kwargs = client._client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "test-model"
    assert kwargs["messages"] == [{"role": "user", "content": "hi"}]


def test_empty_choices_is_a_format_error():
    client = client_returning(return_value=completion())
    with pytest.raises(UpstreamFormatError):
        client.complete("hi")


def test_transport_failure_is_a_service_error():
    client = client_returning(side_effect=OpenAIError("connection reset"))
    with pytest.raises(UpstreamServiceError):
        client.complete("hi")


def test_unconfigured_client():
    with pytest.raises(UpstreamServiceError):
        GenerativeClient(None).complete("hi")


def test_feedback_survives_empty_choices():
    client = client_returning(return_value=completion())
    question = SimpleNamespace(id=1, title="Two Sum", description="Find the pair.", difficulty="Easy")
    execution = ExecutionResult(status="Accepted", passed=2, total=2, execution_time_ms=80)
    feedback = generate_feedback(client, question, "x", "python", execution)
    assert feedback["score"] == 85
