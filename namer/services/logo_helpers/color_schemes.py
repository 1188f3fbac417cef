# /namer/services/logo_helpers/color_schemes.py

from typing import Dict, List, Optional

COLOR_SCHEMES: Dict[str, Dict] = {
    "monochrome": {
        "display_name": "Monochrome",
        "description": "Classic black, white and gray tones",
        "colors": {"primary": "#000000", "secondary": "#666666", "accent": "#999999", "neutral": "#FFFFFF"},
    },
    "ocean_blue": {
        "display_name": "Ocean Blue",
        "description": "Calm and trustworthy blue tones",
        "colors": {"primary": "#003366", "secondary": "#0066CC", "accent": "#3399FF", "neutral": "#E6F2FF"},
    },
    "forest_green": {
        "display_name": "Forest Green",
        "description": "Natural and sustainable green palette",
        "colors": {"primary": "#003D1A", "secondary": "#00664D", "accent": "#009970", "neutral": "#E6F5F0"},
    },
    "warm_sunset": {
        "display_name": "Warm Sunset",
        "description": "Energetic orange and red warmth",
        "colors": {"primary": "#CC3300", "secondary": "#FF6600", "accent": "#FF9933", "neutral": "#FFF2E6"},
    },
    "royal_purple": {
        "display_name": "Royal Purple",
        "description": "Luxurious and creative purple shades",
        "colors": {"primary": "#330066", "secondary": "#6600CC", "accent": "#9933FF", "neutral": "#F2E6FF"},
    },
    "corporate_navy": {
        "display_name": "Corporate Navy",
        "description": "Professional navy with silver accents",
        "colors": {"primary": "#1A237E", "secondary": "#3F51B5", "accent": "#C0C0C0", "neutral": "#F5F5F5"},
    },
    "earthy_tones": {
        "display_name": "Earthy Tones",
        "description": "Warm, grounded browns and beiges",
        "colors": {"primary": "#3E2723", "secondary": "#8D6E63", "accent": "#BCAAA4", "neutral": "#EFEBE9"},
    },
    "tech_blue": {
        "display_name": "Tech Blue",
        "description": "Modern blues with a bright cyan accent",
        "colors": {"primary": "#0D47A1", "secondary": "#2196F3", "accent": "#00E5FF", "neutral": "#E3F2FD"},
    },
    "vibrant_pink": {
        "display_name": "Vibrant Pink",
        "description": "Bold, playful pinks",
        "colors": {"primary": "#AD1457", "secondary": "#E91E63", "accent": "#FF4081", "neutral": "#FCE4EC"},
    },
    "charcoal_gold": {
        "display_name": "Charcoal Gold",
        "description": "Elegant charcoal with gold highlights",
        "colors": {"primary": "#212121", "secondary": "#424242", "accent": "#FFD700", "neutral": "#FAFAFA"},
    },
}


def is_valid_scheme(scheme_id: str) -> bool:
    return scheme_id in COLOR_SCHEMES


def get_palette(scheme_id: str) -> Optional[Dict[str, str]]:
    scheme = COLOR_SCHEMES.get(scheme_id)
    return dict(scheme["colors"]) if scheme else None


def list_color_schemes() -> List[Dict]:
    return [
        {
            "id": scheme_id,
            "display_name": scheme["display_name"],
            "description": scheme["description"],
            "colors": dict(scheme["colors"]),
        }
        for scheme_id, scheme in COLOR_SCHEMES.items()
    ]
