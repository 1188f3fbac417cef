# /namer/services/ai_provider_client.py

"""
Uniform request/response wrapper around the LLM vendors used for name
generation.

Every call returns a plain result dict and never raises, so the
orchestrator can run several models side by side and treat each failure in
isolation:

    {model_id, names, success, error, permanent_error,
     response_time_ms, tokens_used, cost_cents}
"""

import asyncio
import logging
import time
from typing import Callable, Dict, List, Optional, Tuple

import httpx
import google.generativeai as genai
from google.generativeai.types import GenerationConfig

from ..core import config
from . import prompt_library
from .generation_helpers import model_catalog
from .generation_helpers.name_parsing import parse_names

logger = logging.getLogger(__name__)

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"
XAI_CHAT_URL = "https://api.x.ai/v1/chat/completions"
ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"
MAX_OUTPUT_TOKENS = 400

PERMANENT_ERROR_KEYWORDS = (
    "invalid api key",
    "insufficient quota",
    "model not found",
    "unauthorized",
    "forbidden",
)


def is_permanent_error(message: Optional[str]) -> bool:
    lowered = (message or "").lower()
    return any(keyword in lowered for keyword in PERMANENT_ERROR_KEYWORDS)


def _temperature(deep_thinking: bool) -> float:
    return 0.3 if deep_thinking else 0.7


async def _post_json(url: str, headers: Dict, payload: Dict) -> Dict:
    async with httpx.AsyncClient(timeout=config.AI_REQUEST_TIMEOUT_SECONDS) as client:
        response = await client.post(url, headers=headers, json=payload)
    if response.status_code >= 400:
        try:
            detail = response.json().get("error", {})
            detail = detail.get("message", detail) if isinstance(detail, dict) else detail
        except ValueError:
            detail = response.text
        raise RuntimeError(f"HTTP {response.status_code} {response.reason_phrase}: {detail}")
    return response.json()


# --- Provider adapters: each returns (raw_text, tokens_used) ---

async def _call_openai_compatible(url: str, api_key: str, provider_model: str, prompt: str, deep_thinking: bool) -> Tuple[str, int]:
    data = await _post_json(
        url,
        headers={"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"},
        payload={
            "model": provider_model,
            "messages": [
                {"role": "system", "content": prompt_library.NAME_GENERATION_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": _temperature(deep_thinking),
            "max_tokens": MAX_OUTPUT_TOKENS,
        },
    )
    choices = data.get("choices") or []
    if not choices:
        raise ValueError("AI model returned no choices.")
    text = choices[0].get("message", {}).get("content") or ""
    tokens = (data.get("usage") or {}).get("total_tokens", 0)
    return text, tokens


async def _call_anthropic(api_key: str, provider_model: str, prompt: str, deep_thinking: bool) -> Tuple[str, int]:
    data = await _post_json(
        ANTHROPIC_MESSAGES_URL,
        headers={
            "x-api-key": api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        },
        payload={
            "model": provider_model,
            "max_tokens": MAX_OUTPUT_TOKENS,
            "temperature": _temperature(deep_thinking),
            "system": prompt_library.NAME_GENERATION_SYSTEM_PROMPT,
            "messages": [{"role": "user", "content": prompt}],
        },
    )
    blocks = [block.get("text", "") for block in data.get("content", []) if block.get("type") == "text"]
    usage = data.get("usage") or {}
    return "".join(blocks), usage.get("input_tokens", 0) + usage.get("output_tokens", 0)


async def _call_gemini(api_key: str, provider_model: str, prompt: str, deep_thinking: bool) -> Tuple[str, int]:
    genai.configure(api_key=api_key)
    model = genai.GenerativeModel(
        provider_model,
        system_instruction=prompt_library.NAME_GENERATION_SYSTEM_PROMPT,
    )
    generation_config = GenerationConfig(
        temperature=_temperature(deep_thinking),
        max_output_tokens=MAX_OUTPUT_TOKENS,
        response_mime_type="application/json",
    )
    response = await asyncio.wait_for(
        model.generate_content_async(prompt, generation_config=generation_config),
        timeout=config.AI_REQUEST_TIMEOUT_SECONDS,
    )
    if not response.parts:
        raise ValueError("AI model returned an empty response.")
    usage = getattr(response, "usage_metadata", None)
    tokens = getattr(usage, "total_token_count", 0) or 0
    return response.text, tokens


async def _dispatch(model_id: str, prompt: str, deep_thinking: bool) -> Tuple[str, int]:
    info = model_catalog.KNOWN_MODELS[model_id]
    provider = info["provider"]
    api_key = model_catalog.provider_api_key(provider)
    if not api_key:
        raise RuntimeError(f"Invalid API key: no credentials configured for provider '{provider}'.")

    if provider == "openai":
        return await _call_openai_compatible(OPENAI_CHAT_URL, api_key, info["provider_model"], prompt, deep_thinking)
    if provider == "xai":
        return await _call_openai_compatible(XAI_CHAT_URL, api_key, info["provider_model"], prompt, deep_thinking)
    if provider == "anthropic":
        return await _call_anthropic(api_key, info["provider_model"], prompt, deep_thinking)
    if provider == "google":
        return await _call_gemini(api_key, info["provider_model"], prompt, deep_thinking)
    raise RuntimeError(f"Model not found: unsupported provider '{provider}'.")


async def generate_names_with_model(model_id: str, business_description: str, mode: str, deep_thinking: bool) -> Dict:
    """Calls one model and returns its structured outcome."""
    prompt = prompt_library.build_name_prompt(business_description, mode, deep_thinking)
    started = time.perf_counter()
    try:
        text, tokens = await _dispatch(model_id, prompt, deep_thinking)
        names = parse_names(text)
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        return {
            "model_id": model_id,
            "names": names,
            "success": True,
            "error": None,
            "permanent_error": False,
            "response_time_ms": elapsed_ms,
            "tokens_used": tokens,
            "cost_cents": model_catalog.estimate_cost_cents(model_id, tokens),
        }
    except Exception as e:
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        message = str(e) or e.__class__.__name__
        logger.warning("Name generation with model %s failed: %s", model_id, message)
        return {
            "model_id": model_id,
            "names": [],
            "success": False,
            "error": message,
            "permanent_error": is_permanent_error(message),
            "response_time_ms": elapsed_ms,
            "tokens_used": 0,
            "cost_cents": 0,
        }


async def generate_multi_model_names(
    models: List[str],
    business_description: str,
    mode: str,
    deep_thinking: bool,
    on_model_done: Optional[Callable[[Dict], None]] = None,
) -> List[Dict]:
    """
    Calls every requested model concurrently. A failing model never affects
    the others; results come back in request order.
    """

    async def single_model_call(model_id: str) -> Dict:
        result = await generate_names_with_model(model_id, business_description, mode, deep_thinking)
        if on_model_done is not None:
            on_model_done(result)
        return result

    responses = await asyncio.gather(*(single_model_call(m) for m in models), return_exceptions=True)

    cleaned_responses = []
    for model_id, response in zip(models, responses):
        if isinstance(response, Exception):
            cleaned_responses.append({
                "model_id": model_id,
                "names": [],
                "success": False,
                "error": str(response),
                "permanent_error": is_permanent_error(str(response)),
                "response_time_ms": 0,
                "tokens_used": 0,
                "cost_cents": 0,
            })
        else:
            cleaned_responses.append(response)
    return cleaned_responses
