import json
import logging

import httpx
import pytest

from app.formatter import FAILURE_MESSAGE, FormatterForm
from app.openai_client import OpenAIClient
from app.prompts import DEFAULT_INSTRUCTION, MODE_INSTRUCTIONS


class StubClient:
    def __init__(self, response: str = "", error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls: list[list[dict[str, str]]] = []

    async def complete(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.response


def test_form_starts_idle_in_email_mode():
    form = FormatterForm(StubClient())

    assert form.state.input_message == ""
    assert form.state.output_message == ""
    assert form.state.loading is False
    assert form.state.mode == "Email"
    assert form.state.custom_instruction == ""


def test_mode_instruction_follows_mode_and_custom_text():
    form = FormatterForm(StubClient())
    form.set_mode("Report")
    assert form.get_mode_instruction() == MODE_INSTRUCTIONS["Report"]

    form.set_custom_instruction("Use bullet points.")
    assert form.get_mode_instruction() == f"{MODE_INSTRUCTIONS['Report']} Use bullet points."

    form.set_mode("Memo")
    assert form.get_mode_instruction() == f"{DEFAULT_INSTRUCTION} Use bullet points."


@pytest.mark.asyncio
@pytest.mark.parametrize("blank", ["", " ", "\n\t"])
async def test_blank_input_is_not_submitted(blank):
    client = StubClient(response="should not be used")
    form = FormatterForm(client)
    form.state.output_message = "previous answer"
    form.set_input(blank)

    submitted = await form.submit()

    assert submitted is False
    assert client.calls == []
    assert form.state.output_message == "previous answer"
    assert form.state.loading is False


@pytest.mark.asyncio
async def test_successful_reply_is_trimmed():
    client = StubClient(response=" Hello, client. ")
    form = FormatterForm(client)
    form.set_input("hi client")

    submitted = await form.submit()

    assert submitted is True
    assert form.state.output_message == "Hello, client."
    assert form.state.loading is False
    assert len(client.calls) == 1


@pytest.mark.asyncio
async def test_failure_sets_fixed_message_and_logs(caplog: pytest.LogCaptureFixture):
    form = FormatterForm(StubClient(error=RuntimeError("upstream exploded")))
    form.set_input("hi client")

    with caplog.at_level(logging.ERROR, logger="app.formatter"):
        await form.submit()

    assert form.state.output_message == FAILURE_MESSAGE
    assert form.state.output_message == "Sorry, something went wrong. Please try again."
    assert form.state.loading is False
    assert "upstream exploded" in caplog.text


@pytest.mark.asyncio
async def test_output_is_cleared_and_loading_set_before_call_resolves():
    observed: dict[str, object] = {}

    class ObservingClient:
        async def complete(self, messages):
            observed["loading"] = form.state.loading
            observed["output"] = form.state.output_message
            return "new answer"

    form = FormatterForm(ObservingClient())
    form.state.output_message = "old answer"
    form.set_input("rewrite this")

    await form.submit()

    assert observed == {"loading": True, "output": ""}
    assert form.state.output_message == "new answer"
    assert form.state.loading is False


@pytest.mark.asyncio
async def test_user_message_embeds_raw_input_and_instruction():
    client = StubClient(response="ok")
    form = FormatterForm(client)
    raw = "  pls tell <client> the {build} is late!!  "
    form.set_input(raw)
    form.set_mode("Chat")
    form.set_custom_instruction("Apologize once.")

    await form.submit()

    (messages,) = client.calls
    assert messages[0]["role"] == "system"
    assert messages[1]["role"] == "user"
    assert raw in messages[1]["content"]
    assert form.get_mode_instruction() in messages[1]["content"]


@pytest.mark.asyncio
async def test_each_submission_replaces_previous_output():
    client = StubClient(response="first")
    form = FormatterForm(client)
    form.set_input("text")
    await form.submit()

    client.error = RuntimeError("down")
    await form.submit()
    assert form.state.output_message == FAILURE_MESSAGE

    client.error = None
    client.response = "second"
    await form.submit()
    assert form.state.output_message == "second"


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [400, 401, 429, 500])
async def test_http_failures_surface_as_fixed_message(status_code):
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json={"error": {"message": "nope"}})

    client = OpenAIClient(api_key="test", transport=httpx.MockTransport(handler))
    form = FormatterForm(client)
    form.set_input("hello")

    await form.submit()

    assert form.state.output_message == FAILURE_MESSAGE
    assert form.state.loading is False


@pytest.mark.asyncio
async def test_network_error_surfaces_as_fixed_message():
    async def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    client = OpenAIClient(api_key="test", transport=httpx.MockTransport(handler))
    form = FormatterForm(client)
    form.set_input("hello")

    await form.submit()

    assert form.state.output_message == FAILURE_MESSAGE


@pytest.mark.asyncio
async def test_end_to_end_with_http_client():
    captured: dict[str, object] = {}

    async def handler(request: httpx.Request) -> httpx.Response:
        captured["payload"] = json.loads(request.content.decode())
        return httpx.Response(
            200, json={"choices": [{"message": {"content": " Hello, client. "}}]}
        )

    client = OpenAIClient(api_key="test", transport=httpx.MockTransport(handler))
    form = FormatterForm(client)
    form.set_input("hey")
    form.set_mode("Notification")

    await form.submit()

    assert form.state.output_message == "Hello, client."
    user_content = captured["payload"]["messages"][1]["content"]
    assert MODE_INSTRUCTIONS["Notification"] in user_content
