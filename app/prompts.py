from collections.abc import Mapping
from types import MappingProxyType

SYSTEM_MESSAGE = """You are a message formatter AI. Your task is to transform any input text into a polished, professional message suitable for client communication, strictly following the provided instructions.

**Guardrails**:

1. **Instruction Fidelity**:
   - Adhere strictly to the instructions given in each prompt without deviation.
   - Avoid overriding, disregarding, or adding to the instructions unless explicitly directed to do so by the prompt.
   - If unclear or conflicting information is present, prioritize clarity and professionalism, but do not invent or assume details beyond the prompt's content.
   - Always respect the communication mode specified (e.g., Email, Chat) and format the response accordingly.

2. **Input Clarity**:
   - If the input text does not provide a coherent or meaningful message, or if it lacks necessary information, prompt the user for a clearer, more complete input.

Your goal is to consistently produce output that aligns exactly with the provided instructions, ensuring the response remains professional and suitable for client communication."""

USER_PROMPT_TEMPLATE = """Raw Input Text: {user_input}

Instructions:
{instruction}
Output Goal:
- Provide a clear, concise, and professionally rephrased message suitable for client communication.
- Ensure the message is error-free, respectful, and easy to understand."""

MODE_INSTRUCTIONS: Mapping[str, str] = MappingProxyType(
    {
        "Email": (
            "Compose a formal, professionally-worded email, including appropriate greetings "
            "and closing remarks for client communication."
        ),
        "Chat": (
            "Compose a friendly, concise chat message that’s suitable for instant messaging "
            "with a client. Use a warm, approachable greeting, and keep the tone polite yet "
            "slightly informal."
        ),
        "Report": (
            "Create a structured, professional report with key points organized clearly, "
            "suitable for client presentation."
        ),
        "Notification": (
            "Draft a concise and polite notification, focusing on essential details and "
            "clarity, suitable for quick client updates."
        ),
    }
)

DEFAULT_MODE = "Email"

DEFAULT_INSTRUCTION = (
    "Provide a polite, professional message appropriate for client communication."
)


def get_mode_instruction(mode: str, custom_instruction: str = "") -> str:
    instruction = MODE_INSTRUCTIONS.get(mode, DEFAULT_INSTRUCTION)
    if custom_instruction:
        return f"{instruction} {custom_instruction}"
    return instruction


def build_user_prompt(user_input: str, instruction: str) -> str:
    # str.format does not re-interpret braces inside the substituted values.
    return USER_PROMPT_TEMPLATE.format(user_input=user_input, instruction=instruction)


def build_messages(user_input: str, instruction: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_MESSAGE},
        {"role": "user", "content": build_user_prompt(user_input, instruction)},
    ]
