"""Keyword-based topic tags.

Plain substring matching over the lower-cased ``"{title} {content}"``; no tokenization, so
"art" also fires on "start". Order of the result follows the tables below.
"""

from __future__ import annotations

from typing import Dict, List, Tuple


DEFAULT_TAG = "general"

TAG_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "coding": ("code", "programming", "function", "debug", "python", "javascript", "react", "typescript", "api", "database"),
    "creative": ("story", "poem", "creative", "writing", "art", "design", "music", "novel", "character", "plot"),
    "research": ("research", "study", "analysis", "data", "academic", "science", "paper", "citation", "methodology"),
    "business": ("business", "strategy", "marketing", "sales", "revenue", "startup", "growth", "metrics", "roi"),
    "personal": ("help", "advice", "how to", "recommendation", "personal", "life", "decision", "guidance"),
    "ai-calendar": ("calendar", "conversation", "management", "chat history", "ai platforms", "organization"),
    "technical": ("artifact", "component", "implementation", "system", "architecture", "development"),
}

# Context triggers, checked independently of the category table.
SPECIAL_TRIGGERS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("debugging", ("error", "bug", "fix")),
    ("learning", ("learn", "tutorial", "explain")),
    ("optimization", ("optimize", "performance", "speed")),
)


def _any_in(text: str, keywords: Tuple[str, ...]) -> bool:
    return any(k in text for k in keywords)


def infer_tags(content: str, title: str = "") -> List[str]:
    text = f"{title or ''} {content or ''}".lower()
    tags: List[str] = []

    for tag, keywords in TAG_KEYWORDS.items():
        if _any_in(text, keywords):
            tags.append(tag)

    for tag, keywords in SPECIAL_TRIGGERS:
        if _any_in(text, keywords):
            tags.append(tag)

    return tags or [DEFAULT_TAG]
