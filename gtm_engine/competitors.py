import re
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field

from .schemas import CamelModel

_SEPARATORS = re.compile(r"[,\n;]")
_URL = re.compile(r"https?://\S+")


class CompetitorInfo(CamelModel):
    name: str
    website: Optional[str] = None
    linkedin_url: Optional[str] = None
    twitter_handle: Optional[str] = None


class CompetitorStrength(BaseModel):
    strength: str = ""
    example: str = ""


class CompetitorWeakness(BaseModel):
    weakness: str = ""
    opportunity: str = ""


class ContentPattern(BaseModel):
    pattern: str = ""
    frequency: str = ""
    effectiveness: str = Field(default="Medium", description="High | Medium | Low")


class CompetitorAnalysis(CamelModel):
    competitor: str
    strengths: List[CompetitorStrength] = Field(default_factory=list)
    weaknesses: List[CompetitorWeakness] = Field(default_factory=list)
    content_patterns: List[ContentPattern] = Field(default_factory=list)
    top_performing_content: List[str] = Field(default_factory=list)


class RecommendedAngle(BaseModel):
    angle: str = ""
    rationale: str = ""
    differentiator: str = ""


class AvoidItem(BaseModel):
    tactic: str = ""
    reason: str = ""


class CompetitorInsights(CamelModel):
    competitors: List[CompetitorAnalysis] = Field(default_factory=list)
    recommended_angles: List[RecommendedAngle] = Field(default_factory=list)
    avoid_list: List[AvoidItem] = Field(default_factory=list)
    summary: str = ""
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def parse_competitors(text: Optional[str]) -> List[CompetitorInfo]:
    """Split the free-text competitor field into entries, pulling out any URL."""
    entries = [part.strip() for part in _SEPARATORS.split(text or "") if part.strip()]
    parsed: List[CompetitorInfo] = []
    for entry in entries:
        match = _URL.search(entry)
        name = _URL.sub("", entry, count=1).strip()
        parsed.append(CompetitorInfo(name=name or entry, website=match.group(0) if match else None))
    return parsed


def search_queries(competitor: CompetitorInfo, industry: str) -> List[str]:
    slug = re.sub(r"\s+", "-", competitor.name.lower())
    queries = [
        f"{competitor.name} {industry}",
        f"{competitor.name} linkedin posts",
        f"{competitor.name} company updates",
        f"{competitor.name} product features",
        f"site:linkedin.com/company/{slug}",
    ]
    if competitor.website:
        host = urlparse(competitor.website).hostname
        if host:
            queries.append(f"site:{host}")
    return queries


def format_insights_for_prompt(insights: Optional[CompetitorInsights]) -> str:
    """Render insights as the markdown block injected into the generation prompt."""
    if insights is None or not insights.competitors:
        return ""

    lines = ["## Competitor Analysis", "", f"**Summary:** {insights.summary}", "", "**Competitor Content Patterns:**"]
    for competitor in insights.competitors:
        lines.append("")
        lines.append(f"### {competitor.competitor}")
        if competitor.strengths:
            lines.append("Strengths to learn from:")
            for item in competitor.strengths[:2]:
                lines.append(f'- {item.strength}: "{item.example}"')
        if competitor.weaknesses:
            lines.append("Gaps to exploit:")
            for item in competitor.weaknesses[:2]:
                lines.append(f"- {item.weakness} → Opportunity: {item.opportunity}")

    if insights.recommended_angles:
        lines.append("")
        lines.append("**Recommended Differentiating Angles:**")
        for angle in insights.recommended_angles[:3]:
            lines.append(f"- {angle.angle}: {angle.rationale}")

    if insights.avoid_list:
        lines.append("")
        lines.append("**Tactics to Avoid:**")
        for avoid in insights.avoid_list[:3]:
            lines.append(f"- Don't {avoid.tactic}: {avoid.reason}")

    return "\n".join(lines) + "\n"


def insights_are_stale(
    insights: Optional[CompetitorInsights],
    now: Optional[datetime] = None,
    max_age_days: int = 7,
) -> bool:
    if insights is None:
        return True
    now = now or datetime.now(timezone.utc)
    generated_at = insights.generated_at
    if generated_at.tzinfo is None:
        generated_at = generated_at.replace(tzinfo=timezone.utc)
    return now - generated_at > timedelta(days=max_age_days)
