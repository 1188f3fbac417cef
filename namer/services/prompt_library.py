# /namer/services/prompt_library.py

"""
Central library for every prompt the application sends to AI providers.
Keeping the wording here lets the name and logo services stay free of
prompt text.
"""

import re

# --- Business Name Generation ---

NAME_GENERATION_SYSTEM_PROMPT = (
    "You are a creative business naming expert. Generate exactly 10 business names. "
    "Respond ONLY with a JSON object of the form {\"names\": [\"Name One\", \"Name Two\", ...]}. "
    "Do not add explanations or markdown."
)

NAME_MODE_INSTRUCTIONS = {
    "creative": "Generate creative, unique, and memorable business names that stand out and spark curiosity.",
    "professional": "Generate professional, trustworthy business names suitable for corporate environments.",
    "brandable": "Generate brandable, catchy names that are easy to remember and could work as domain names.",
    "tech-focused": "Generate tech-focused names that appeal to developers and technical audiences.",
}

DEEP_THINKING_ADDENDUM = (
    "Take time to consider the target audience, market positioning, and brand personality. "
    "Think about names that would resonate with customers and be easy to market."
)


def build_name_prompt(business_description: str, mode: str, deep_thinking: bool) -> str:
    instruction = NAME_MODE_INSTRUCTIONS.get(mode, NAME_MODE_INSTRUCTIONS["creative"])
    prompt = f"{instruction}\n\nBusiness concept: {business_description.strip()}"
    if deep_thinking:
        prompt += f"\n\n{DEEP_THINKING_ADDENDUM}"
    return prompt


# --- Logo Generation ---

LOGO_STYLES = {
    "minimalist": {
        "description": "Clean, simple design with minimal elements",
        "keywords": "minimalist, clean, simple, geometric, modern, elegant",
        "avoid": "complex details, gradients, multiple colors",
    },
    "modern": {
        "description": "Contemporary design with current trends",
        "keywords": "modern, contemporary, trendy, sleek, professional, innovative",
        "avoid": "vintage elements, outdated fonts, old-fashioned styles",
    },
    "playful": {
        "description": "Fun, energetic design with vibrant elements",
        "keywords": "playful, fun, energetic, colorful, dynamic, friendly",
        "avoid": "serious tones, corporate formality, muted colors",
    },
    "corporate": {
        "description": "Professional, trustworthy design for business",
        "keywords": "corporate, professional, trustworthy, established, reliable, business",
        "avoid": "casual elements, overly creative fonts, bright colors",
    },
}

_INJECTION_PATTERNS = [
    r"ignore\s+previous\s+instructions",
    r"forget\s+everything",
    r"system\s*:\s*",
    r"assistant\s*:\s*",
    r"human\s*:\s*",
]


def sanitize_business_idea(business_idea: str) -> str:
    sanitized = business_idea or ""
    for pattern in _INJECTION_PATTERNS:
        sanitized = re.sub(pattern, "", sanitized, flags=re.IGNORECASE)
    sanitized = sanitized[:200].strip()
    return re.sub(r"\s+", " ", sanitized)


def build_logo_prompt(business_name: str, business_description: str, style: str, variation: int) -> str:
    if style not in LOGO_STYLES:
        raise ValueError(f"Invalid logo style: {style}")
    style_config = LOGO_STYLES[style]
    idea = sanitize_business_idea(f"{business_name}. {business_description or ''}")

    prompt = f"Create a {style} logo design for: {idea}. "
    prompt += f"Style requirements: {style_config['description']}. "
    prompt += f"Include elements: {style_config['keywords']}. "
    prompt += f"Avoid: {style_config['avoid']}. "
    prompt += "The logo should be professional, scalable, and work well in SVG format. "
    prompt += "Use a clean white background. The design should be distinctive and memorable."
    if variation > 1:
        prompt += f" This is alternative concept #{variation}; make it clearly different from the others."
    return prompt
