"""
Content Analyzer - LLM-powered enrichment of a single article.

Features:
- Deterministic instruction prompt with an example JSON shape
- One provider call per article at low temperature
- Code-fence tolerant JSON parsing
- Field validation with safe defaults (summary, keywords, category,
  priority, read time, bullet points)
"""

import json
import math
import re
from dataclasses import dataclass, field

from .exceptions import ResponseParseError
from .providers import LLMProvider

PRIORITIES = ("high", "medium", "low")

DEFAULT_CATEGORY = "general"
DEFAULT_PRIORITY = "medium"
DEFAULT_READ_TIME = 5

_FENCE_PATTERN = re.compile(r"```(?:json)?\n?", re.IGNORECASE)
_LEADING_INT_PATTERN = re.compile(r"^\s*(\d+)")


@dataclass
class Enrichment:
    """Normalized analysis result, ready to be stored on a content item."""
    summary: str = ""
    keywords: list[str] = field(default_factory=list)
    bullet_points: list[str] = field(default_factory=list)
    category: str = DEFAULT_CATEGORY
    priority: str = DEFAULT_PRIORITY
    estimated_read_time: int = DEFAULT_READ_TIME

    @classmethod
    def defaults(cls) -> "Enrichment":
        """Values written when analysis fails."""
        return cls()

    def as_fields(self) -> dict:
        """Content item fields for a store update."""
        return {
            "summary": self.summary,
            "keywords": list(self.keywords),
            "bullet_points": list(self.bullet_points),
            "category": self.category,
            "priority": self.priority,
            "estimated_read_time": self.estimated_read_time,
        }


class ContentAnalyzer:
    """Builds the analysis prompt, calls the provider and validates the answer."""

    SYSTEM_PROMPT = (
        "You are an expert content analyst. Provide accurate, concise summaries "
        "and relevant keywords for articles. Always respond with valid JSON."
    )

    INSTRUCTION_PROMPT = """Analyze the following article and provide:
1. A concise summary (max 200 words)
2. 5-7 relevant keywords
3. Category classification
4. Priority level (high/medium/low) based on general interest and urgency
5. Estimated read time in minutes
6. 5-10 bullet points"""

    RESPONSE_FORMAT = """Please respond in valid JSON format:
{
  "summary": "Brief summary here",
  "keywords": ["keyword1", "keyword2", "keyword3"],
  "category": "category name",
  "priority": "medium",
  "estimatedReadTime": 5,
  "bulletPoints": ["bullet point 1", "bullet point 2", "bullet point 3"]
}"""

    def __init__(
        self,
        provider: LLMProvider,
        model: str | None = None,
        max_tokens: int = 1000,
        temperature: float = 0.3,
        content_limit: int = 4000,
    ):
        """
        Initialize analyzer with an LLM provider.

        Args:
            provider: LLM provider instance
            model: Model override (provider default if None)
            max_tokens: Completion budget
            temperature: Sampling temperature, kept low for stable output
            content_limit: Characters of article text sent in the prompt
        """
        self.provider = provider
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.content_limit = content_limit

    def build_prompt(self, title: str, content: str) -> str:
        """Build the user prompt for one article."""
        return (
            f"{self.INSTRUCTION_PROMPT}\n\n"
            f"Title: {title}\n"
            f"Content: {content[:self.content_limit]}\n\n"
            f"{self.RESPONSE_FORMAT}"
        )

    async def analyze(self, title: str, content: str) -> Enrichment:
        """
        Analyze one article.

        Raises:
            ResponseParseError: If the provider returns nothing or non-JSON text
        """
        response = await self.provider.complete_async(
            user_prompt=self.build_prompt(title, content),
            system_prompt=self.SYSTEM_PROMPT,
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            json_mode=True,
        )
        data = parse_response(response.text)
        return normalize_analysis(data)


def parse_response(text: str | None) -> dict:
    """
    Parse the provider's text as a JSON object, ignoring code fences.

    Raises:
        ResponseParseError: If text is empty, not JSON, or not a JSON object
    """
    if not text or not text.strip():
        raise ResponseParseError("No response text from LLM provider")

    cleaned = _FENCE_PATTERN.sub("", text).strip()

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Invalid JSON response from LLM provider: {e}") from e

    if not isinstance(data, dict):
        raise ResponseParseError(
            f"Expected a JSON object from LLM provider, got {type(data).__name__}"
        )

    return data


def normalize_analysis(data: dict) -> Enrichment:
    """Coerce a parsed response into an Enrichment, filling defaults."""
    summary = data.get("summary")

    return Enrichment(
        summary=summary.strip() if isinstance(summary, str) else "",
        keywords=_string_list(data.get("keywords")),
        bullet_points=_string_list(data.get("bulletPoints")),
        category=_category(data.get("category")),
        priority=_priority(data.get("priority")),
        estimated_read_time=_read_time(data.get("estimatedReadTime")),
    )


def _string_list(value) -> list[str]:
    if not isinstance(value, list):
        return []
    items = []
    for item in value:
        if item is None or isinstance(item, (dict, list)):
            continue
        text = str(item).strip()
        if text:
            items.append(text)
    return items


def _category(value) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return DEFAULT_CATEGORY


def _priority(value) -> str:
    if isinstance(value, str) and value.strip().lower() in PRIORITIES:
        return value.strip().lower()
    return DEFAULT_PRIORITY


def _read_time(value) -> int:
    """Whole minutes; anything missing, unparseable or not positive gives the default."""
    minutes = None
    if isinstance(value, bool):
        pass
    elif isinstance(value, (int, float)) and math.isfinite(value):
        minutes = int(value)
    elif isinstance(value, str):
        if match := _LEADING_INT_PATTERN.match(value):
            minutes = int(match.group(1))

    if not minutes or minutes < 0:
        return DEFAULT_READ_TIME
    return minutes
