"""The formatter form component.

``FormatterForm`` holds the state behind the page: the raw input, the
selected mode, the custom instruction and the last formatted output. A
submission builds the prompt, awaits one chat completion and settles the
output to either the reply or ``FAILURE_MESSAGE``.
"""

import logging
from dataclasses import dataclass
from typing import Protocol

from app import prompts

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Sorry, something went wrong. Please try again."


class CompletionClient(Protocol):
    async def complete(self, messages: list[dict[str, str]]) -> str: ...


@dataclass
class FormState:
    input_message: str = ""
    output_message: str = ""
    loading: bool = False
    mode: str = prompts.DEFAULT_MODE
    custom_instruction: str = ""


class FormatterForm:
    def __init__(self, client: CompletionClient) -> None:
        self._client = client
        self.state = FormState()

    def set_input(self, text: str) -> None:
        self.state.input_message = text

    def set_mode(self, name: str) -> None:
        # Unknown modes are kept and fall back to the default instruction later.
        self.state.mode = name

    def set_custom_instruction(self, text: str) -> None:
        self.state.custom_instruction = text

    def get_mode_instruction(self) -> str:
        return prompts.get_mode_instruction(self.state.mode, self.state.custom_instruction)

    def build_messages(self) -> list[dict[str, str]]:
        return prompts.build_messages(self.state.input_message, self.get_mode_instruction())

    async def submit(self) -> bool:
        """Run one formatting request.

        Returns ``False`` without touching the network when the input is
        blank. Otherwise the output is cleared before the call and always
        settles, with ``loading`` reset whatever the outcome.
        """
        if not self.state.input_message.strip():
            return False

        self.state.loading = True
        self.state.output_message = ""
        messages = self.build_messages()

        try:
            reply = await self._client.complete(messages)
            self.state.output_message = reply.strip()
        except Exception:
            logger.exception("Error calling chat completion API (mode=%s)", self.state.mode)
            self.state.output_message = FAILURE_MESSAGE
        finally:
            self.state.loading = False
        return True
