import logging
from functools import lru_cache
from pathlib import Path

from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from app.config import Settings, get_settings
from app.formatter import CompletionClient, FormatterForm
from app.openai_client import OpenAIClient, UnconfiguredClient
from app.prompts import DEFAULT_MODE, MODE_INSTRUCTIONS
from app.rendering import render_output
from app.schemas import FormatRequest, FormatResponse, ModesResponse

logger = logging.getLogger(__name__)

app = FastAPI(title="Message Formatter")
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


@lru_cache(maxsize=1)
def get_openai_client() -> CompletionClient:
    settings = get_settings()
    if not settings.api_key:
        logger.warning("OPENAI_API_KEY is not set; format requests will fail")
        return UnconfiguredClient()
    return OpenAIClient.from_settings(settings)


@app.get("/", response_class=HTMLResponse)
async def index(request: Request):
    return templates.TemplateResponse(
        request,
        "index.html",
        {"modes": list(MODE_INSTRUCTIONS), "default_mode": DEFAULT_MODE},
    )


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/api/modes", response_model=ModesResponse)
async def modes():
    return ModesResponse(modes=list(MODE_INSTRUCTIONS), default=DEFAULT_MODE)


@app.post("/api/format", response_model=FormatResponse)
async def format_message(
    req: FormatRequest,
    openai_client: CompletionClient = Depends(get_openai_client),
    settings: Settings = Depends(get_settings),
):
    form = FormatterForm(openai_client)
    form.set_input(req.text)
    form.set_mode(req.mode)
    form.set_custom_instruction(req.custom_instruction)

    submitted = await form.submit()

    output = form.state.output_message
    return FormatResponse(
        output=output,
        html=render_output(output, settings.render_raw_html),
        submitted=submitted,
    )
