"""Supported chat platforms.

The set is closed: records may only carry one of these keys. Only some platforms have an
export parser (see ``chatcal.parser``); the rest exist so the frontend can filter on them.
"""

from __future__ import annotations

from typing import Dict, List


PLATFORMS: Dict[str, Dict[str, str]] = {
    "chatgpt": {"name": "ChatGPT", "color": "#10a37f", "icon": "C"},
    "claude": {"name": "Claude", "color": "#cc8644", "icon": "Cl"},
    "gemini": {"name": "Gemini", "color": "#4285f4", "icon": "G"},
    "grok": {"name": "Grok", "color": "#8b5cf6", "icon": "X"},
    "perplexity": {"name": "Perplexity", "color": "#14b8a6", "icon": "P"},
    "deepseek": {"name": "DeepSeek", "color": "#ef4444", "icon": "D"},
}

# The "home" platform is what the app shows when cross-platform mode is off.
HOME_PLATFORM = "claude"
CURRENT_SESSION_ID = "claude_current_session"


def platform_keys() -> List[str]:
    return list(PLATFORMS.keys())


def is_platform(key: str) -> bool:
    return isinstance(key, str) and key in PLATFORMS
