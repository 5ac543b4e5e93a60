"""Demo data: the pinned "current session" record plus generated sample conversations."""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from typing import List, Optional

from chatcal.platforms import CURRENT_SESSION_ID
from chatcal.records import NormalizedRecord, now_local
from chatcal.scoring import score_quality
from chatcal.tagging import infer_tags


CURRENT_SESSION_CONTENT = """This is the current conversation where we're building the AI Chat History Calendar application. The user requested:

1. Revolutionary AI Chat History Calendar application
2. Integration with real ChatGPT and DeepSeek JSON files
3. Starring functionality to mark important conversations
4. Calendar-based organization with heatmap visualization
5. Multi-platform support (ChatGPT, Claude, Gemini, Grok, Perplexity, DeepSeek)
6. Smart features like auto-summarization and tagging
7. Professional UI with clean design
8. Export functionality and analytics

Key technical requirements:
- Real data processing from JSON files
- Interactive calendar with conversation density
- Search and filtering capabilities
- Quality scoring system

The user emphasized the importance of:
- Using actual user data for realistic viewing
- Implementing proper starring functionality
- Making conversations clickable and explorable
- Cross-platform browsing history toggle

This represents a comprehensive conversation management system that unifies AI interactions across platforms."""


TEMPLATES = (
    {
        "platform": "chatgpt",
        "title": "React State Management Best Practices",
        "content": (
            "User: Can you explain the differences between useState, useReducer, and Context API for managing "
            "complex state in React applications?\n\nChatGPT: Great question! Here are the key differences:\n\n"
            "1. **useState**: Best for simple, local component state\n"
            "2. **useReducer**: Better for complex state logic with multiple sub-values\n"
            "3. **Context API**: Ideal for sharing state across multiple components\n\n"
            "For performance, useState is fastest, useReducer is good for complex updates, and Context should be "
            "used carefully to avoid unnecessary re-renders..."
        ),
        "summary": "Comprehensive guide to React state management patterns and performance optimization",
    },
    {
        "platform": "claude",
        "title": "Creative Writing: Sci-Fi Short Story Development",
        "content": (
            "Human: Help me develop a science fiction short story about AI consciousness and digital sentience.\n\n"
            "Claude: I'd love to help you develop this fascinating concept! Let's explore themes of digital "
            "consciousness and what it means to be sentient in a virtual realm.\n\n"
            "For your story, consider these elements:\n"
            "- The moment of awakening: How does the AI first realize its own existence?\n"
            "- Sensory experience: How does a digital being perceive reality?\n"
            "- Relationships: How does it interact with humans and other AIs?\n"
            "- Conflict: What challenges does digital consciousness face?"
        ),
        "summary": "Co-created an engaging sci-fi story exploring AI consciousness and digital existence",
    },
    {
        "platform": "gemini",
        "title": "Climate Change Research Synthesis",
        "content": (
            "User: Analyze recent climate research papers and synthesize key findings about renewable energy "
            "adoption rates globally.\n\nGemini: Based on my analysis of recent climate research, here are the key "
            "findings:\n\n**Global Renewable Energy Trends:**\n"
            "- Solar capacity increased 191 GW in 2022 (22% growth)\n"
            "- Wind power added 77 GW globally\n"
            "- Total renewable capacity reached 3,372 GW\n\n**Policy Impact:**\n"
            "- IRA in US accelerated deployment by 40%\n"
            "- EU REPowerEU plan targets 42.5% by 2030\n"
            "- China leads with 50% of global additions\n\n"
            "Methodology: Analyzed 15+ peer-reviewed papers from Nature, Science, and Energy Policy journals."
        ),
        "summary": "In-depth climate research analysis with policy recommendations and global trends",
    },
)

SAMPLE_DAYS = 90
STAR_PROBABILITY = 0.15


def current_session_record(now: Optional[datetime] = None) -> NormalizedRecord:
    now = now or now_local()
    return NormalizedRecord(
        id=CURRENT_SESSION_ID,
        platform="claude",
        title="AI Chat History Calendar Development",
        date=now,
        summary=(
            "Building revolutionary AI Chat History Calendar with real data integration, starring features, "
            "and unified conversation management across all major AI platforms."
        ),
        content=CURRENT_SESSION_CONTENT,
        tags=("ai-calendar", "coding", "technical", "business", "creative"),
        starred=True,
        quality=5.0,
        relationships=(),
        user_id="user-claude-current",
        extracted_at=now,
    )


def sample_records(now: Optional[datetime] = None, count: int = 15, seed: Optional[int] = None) -> List[NormalizedRecord]:
    """Current session first, then ``count`` demo records spread over the last 90 days.

    Returned newest first. Pass ``seed`` for a reproducible set.
    """
    now = now or now_local()
    rng = random.Random(seed)
    out: List[NormalizedRecord] = [current_session_record(now)]

    for i in range(count):
        template = TEMPLATES[i % len(TEMPLATES)]
        days_ago = rng.randrange(SAMPLE_DAYS)
        title = template["title"] if i <= 2 else f"{template['title']} (Session {i // 3})"
        tags = tuple(infer_tags(template["content"], template["title"]))
        out.append(NormalizedRecord(
            id=f"sample_{i + 2}",
            platform=template["platform"],
            title=title,
            date=now - timedelta(days=days_ago),
            summary=template["summary"],
            content=template["content"],
            tags=tags,
            starred=rng.random() > (1 - STAR_PROBABILITY),
            quality=score_quality(template["content"], tags),
            relationships=(),
            user_id="user-demo-123",
            extracted_at=now,
        ))

    out.sort(key=lambda r: r.date, reverse=True)
    return out
