# /namer/services/generation_helpers/model_catalog.py

from typing import Dict, List

from namer.core import config

ALL_MODES = ["creative", "professional", "brandable", "tech-focused"]

KNOWN_MODELS: Dict[str, Dict] = {
    "gpt-4": {
        "display_name": "GPT-4",
        "description": "Most capable GPT model for high-quality name generation",
        "provider": "openai",
        "provider_model": "gpt-4",
        "capabilities": ALL_MODES,
        "cost_per_1k_tokens": 0.03,
    },
    "claude-3.5-sonnet": {
        "display_name": "Claude 3.5 Sonnet",
        "description": "Context-aware model for thoughtful name suggestions",
        "provider": "anthropic",
        "provider_model": "claude-3-5-sonnet-20241022",
        "capabilities": ALL_MODES,
        "cost_per_1k_tokens": 0.015,
    },
    "gemini-1.5-pro": {
        "display_name": "Gemini 1.5 Pro",
        "description": "Google's multimodal AI for diverse creative approaches",
        "provider": "google",
        "provider_model": "gemini-1.5-pro",
        "capabilities": ALL_MODES,
        "cost_per_1k_tokens": 0.0005,
    },
    "grok-beta": {
        "display_name": "Grok Beta",
        "description": "Playful, unconventional naming ideas",
        "provider": "xai",
        "provider_model": "grok-beta",
        "capabilities": ["creative", "brandable"],
        "cost_per_1k_tokens": 0.005,
    },
}

_PROVIDER_KEYS = {
    "openai": lambda: config.OPENAI_API_KEY,
    "anthropic": lambda: config.ANTHROPIC_API_KEY,
    "google": lambda: config.GOOGLE_API_KEY,
    "xai": lambda: config.XAI_API_KEY,
}


def is_known_model(model_id: str) -> bool:
    return model_id in KNOWN_MODELS


def provider_api_key(provider: str):
    getter = _PROVIDER_KEYS.get(provider)
    return getter() if getter else None


def validate_requested_models(models: List[str]) -> List[str]:
    """Rejects empty or unknown model lists; drops duplicates, keeping order."""
    if not models:
        raise ValueError("At least one AI model must be requested.")
    unknown = [model for model in models if not is_known_model(model)]
    if unknown:
        raise ValueError(f"Unknown AI model(s): {', '.join(unknown)}")
    ordered: List[str] = []
    for model in models:
        if model not in ordered:
            ordered.append(model)
    return ordered


def list_available_models() -> List[Dict]:
    return [
        {
            "id": model_id,
            "display_name": info["display_name"],
            "description": info["description"],
            "provider": info["provider"],
            "capabilities": list(info["capabilities"]),
            "available": bool(provider_api_key(info["provider"])),
        }
        for model_id, info in KNOWN_MODELS.items()
    ]


def estimate_cost_cents(model_id: str, tokens_used: int) -> int:
    rate = KNOWN_MODELS[model_id]["cost_per_1k_tokens"]
    return int(round(tokens_used / 1000 * rate * 100))
