from pydantic import BaseModel

from app.prompts import DEFAULT_MODE


class FormatRequest(BaseModel):
    # Blank text is accepted and answered as a no-op.
    text: str = ""
    mode: str = DEFAULT_MODE
    custom_instruction: str = ""


class FormatResponse(BaseModel):
    output: str
    html: str
    submitted: bool


class ModesResponse(BaseModel):
    modes: list[str]
    default: str
