from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from .constants import PLATFORM_IDS, Pillar, Platform


class CamelModel(BaseModel):
    """Base for payloads exchanged with the browser, which speaks camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Onboarding form
# ---------------------------------------------------------------------------


class FormData(CamelModel):
    # Step 1: Company
    company_name: str = ""
    website: str = ""
    industry: str = ""
    product_description: str = ""
    logo: str = Field(default="", description="base64 data URL")

    # Step 2: Audience
    target_audience: str = ""
    job_titles: str = ""
    company_size: str = ""
    pain_points: str = Field(default="", description="Newline-separated list")

    # Step 3: Positioning
    unique_value: str = ""
    key_benefits: str = ""
    competitors: str = ""
    pricing_model: str = ""

    # Step 4: Current state
    current_channels: List[str] = Field(default_factory=list)
    content_frequency: str = ""
    team_size: str = ""

    # Step 5: Goals
    primary_goal: str = ""
    content_tone: str = ""
    target_platforms: List[str] = Field(default_factory=list)

    content_language: str = "en"

    def pain_point_list(self) -> List[str]:
        return [p.strip() for p in self.pain_points.split("\n") if p.strip()]


def _rule(message: str) -> PydanticCustomError:
    return PydanticCustomError("form_rule", message)


def _min_length(value: str, length: int, message: str) -> str:
    if len(value or "") < length:
        raise _rule(message)
    return value


class StepModel(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
        extra="ignore",
    )


class CompanyStep(StepModel):
    company_name: str = ""
    website: str = ""
    industry: str = ""
    product_description: str = ""
    logo: Optional[str] = None

    @field_validator("company_name")
    @classmethod
    def company_required(cls, value: str) -> str:
        return _min_length(value, 1, "Company name is required")

    @field_validator("website")
    @classmethod
    def website_is_url(cls, value: str) -> str:
        if value == "":
            return value
        parsed = urlparse(value)
        if not parsed.scheme or not parsed.netloc:
            raise _rule("Must be a valid URL")
        return value

    @field_validator("industry")
    @classmethod
    def industry_required(cls, value: str) -> str:
        return _min_length(value, 1, "Industry is required")

    @field_validator("product_description")
    @classmethod
    def description_length(cls, value: str) -> str:
        return _min_length(value, 10, "Please provide a brief product description")


class AudienceStep(StepModel):
    target_audience: str = ""
    job_titles: str = ""
    company_size: str = ""
    pain_points: str = ""

    @field_validator("target_audience")
    @classmethod
    def audience_length(cls, value: str) -> str:
        return _min_length(value, 10, "Please describe your target audience")

    @field_validator("job_titles")
    @classmethod
    def titles_required(cls, value: str) -> str:
        return _min_length(value, 1, "Please list target job titles")

    @field_validator("company_size")
    @classmethod
    def size_required(cls, value: str) -> str:
        return _min_length(value, 1, "Please select company size")

    @field_validator("pain_points")
    @classmethod
    def pains_length(cls, value: str) -> str:
        return _min_length(value, 10, "Please describe key pain points")


class PositioningStep(StepModel):
    unique_value: str = ""
    key_benefits: str = ""
    competitors: Optional[str] = None
    pricing_model: Optional[str] = None

    @field_validator("unique_value")
    @classmethod
    def value_length(cls, value: str) -> str:
        return _min_length(value, 10, "Please describe your unique value proposition")

    @field_validator("key_benefits")
    @classmethod
    def benefits_length(cls, value: str) -> str:
        return _min_length(value, 10, "Please list key benefits")


class CurrentStateStep(StepModel):
    current_channels: List[str] = Field(default_factory=list)
    content_frequency: str = ""
    team_size: str = ""

    @field_validator("current_channels")
    @classmethod
    def channels_required(cls, value: List[str]) -> List[str]:
        if len(value) < 1:
            raise _rule("Please select at least one channel")
        return value

    @field_validator("content_frequency")
    @classmethod
    def frequency_required(cls, value: str) -> str:
        return _min_length(value, 1, "Please select content frequency")

    @field_validator("team_size")
    @classmethod
    def team_required(cls, value: str) -> str:
        return _min_length(value, 1, "Please select team size")


class GoalsStep(StepModel):
    primary_goal: str = ""
    content_tone: str = ""
    target_platforms: List[str] = Field(default_factory=list)

    @field_validator("primary_goal")
    @classmethod
    def goal_required(cls, value: str) -> str:
        return _min_length(value, 1, "Please select a primary goal")

    @field_validator("content_tone")
    @classmethod
    def tone_required(cls, value: str) -> str:
        return _min_length(value, 1, "Please select a content tone")

    @field_validator("target_platforms")
    @classmethod
    def platforms_valid(cls, value: List[str]) -> List[str]:
        if len(value) < 1:
            raise _rule("Please select at least one platform")
        unknown = [p for p in value if p not in PLATFORM_IDS]
        if unknown:
            raise _rule(f"Unknown platform: {', '.join(unknown)}")
        return value


STEP_SCHEMAS = {
    1: CompanyStep,
    2: AudienceStep,
    3: PositioningStep,
    4: CurrentStateStep,
    5: GoalsStep,
}

STEP_TITLES = {
    1: "Company",
    2: "Audience",
    3: "Positioning",
    4: "Current State",
    5: "Goals",
}


def _as_payload(data: Union[FormData, Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump(by_alias=True)
    return dict(data)


def step_errors(step: int, data: Union[FormData, Dict[str, Any]]) -> List[str]:
    schema = STEP_SCHEMAS.get(step)
    if schema is None:
        return []
    try:
        schema.model_validate(_as_payload(data))
    except ValidationError as exc:
        return [error["msg"] for error in exc.errors()]
    return []


def validate_step(step: int, data: Union[FormData, Dict[str, Any]]) -> bool:
    if step not in STEP_SCHEMAS:
        return False
    return not step_errors(step, data)


def can_proceed(step: int, form: FormData) -> bool:
    """The wizard's lighter gate for enabling "Next" on a step."""
    if step == 1:
        return bool(form.company_name and form.product_description and form.industry)
    if step == 2:
        return bool(form.target_audience and form.pain_points)
    if step == 3:
        return bool(form.unique_value)
    if step == 5:
        return bool(form.primary_goal and form.target_platforms)
    return True


def format_errors(exc: ValidationError) -> List[str]:
    return [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]


# ---------------------------------------------------------------------------
# Generated content
# ---------------------------------------------------------------------------


class PostStatus(str, Enum):
    READY = "ready"
    REVIEW = "review"


class LibraryPost(CamelModel):
    """A post as stored in the library; content only has to be non-empty."""

    id: int = Field(..., gt=0)
    title: str
    pillar: Pillar
    status: PostStatus = PostStatus.READY
    content: str

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    @field_validator("title")
    @classmethod
    def title_required(cls, value: str) -> str:
        return _min_length(value, 1, "Title is required")

    @field_validator("content")
    @classmethod
    def check_content(cls, value: str) -> str:
        return _min_length(value, 1, "Content is required")


class Post(LibraryPost):
    """A post as the model must produce it, and as edits must leave it."""

    @field_validator("content")
    @classmethod
    def check_content(cls, value: str) -> str:
        if len(value) < 50:
            raise _rule("Content must be at least 50 characters")
        if len(value) > 3000:
            raise _rule("Content must be less than 3000 characters")
        return value


def content_in_bounds(text: str) -> bool:
    return 50 <= len(text) <= 3000


class GeneratedContent(CamelModel):
    """A full library as requested from the model, with per-platform counts enforced."""

    linkedin: List[Post] = Field(..., min_length=15, max_length=25)
    twitter: List[Post] = Field(..., min_length=8, max_length=15)
    threads: List[Post] = Field(..., min_length=3, max_length=5)
    email: List[Post] = Field(..., min_length=4, max_length=6)
    ads: List[Post] = Field(..., min_length=4, max_length=6)


class PartialGeneratedContent(CamelModel):
    """Library with no count constraints; what the workspace stores."""

    linkedin: List[LibraryPost] = Field(default_factory=list)
    twitter: List[LibraryPost] = Field(default_factory=list)
    threads: List[LibraryPost] = Field(default_factory=list)
    email: List[LibraryPost] = Field(default_factory=list)
    ads: List[LibraryPost] = Field(default_factory=list)

    def posts_for(self, platform: str) -> List[LibraryPost]:
        return getattr(self, platform)

    def items(self):
        for platform in PLATFORM_IDS:
            yield platform, self.posts_for(platform)

    def total(self) -> int:
        return sum(len(posts) for _, posts in self.items())


class AppData(CamelModel):
    form_data: Dict[str, Any]
    generated_content: PartialGeneratedContent
    daily_tasks: Dict[int, bool] = Field(default_factory=dict)
    ready_state: bool = False
    export_date: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    version: str = "1.0.0"


_PILLAR_ALIASES: Dict[str, Pillar] = {
    "product": Pillar.PRODUCT,
    "product journey": Pillar.PRODUCT,
    "founder": Pillar.FOUNDER,
    "founder story": Pillar.FOUNDER,
    "metrics": Pillar.METRICS,
    "growth metrics": Pillar.METRICS,
    "growth": Pillar.METRICS,
    "insights": Pillar.INSIGHTS,
    "industry insights": Pillar.INSIGHTS,
    "industry": Pillar.INSIGHTS,
    "community": Pillar.COMMUNITY,
    "community wins": Pillar.COMMUNITY,
    "culture": Pillar.CULTURE,
    "culture/bts": Pillar.CULTURE,
    "bts": Pillar.CULTURE,
    "engagement": Pillar.ENGAGEMENT,
}


def normalize_pillar(value: Any) -> Optional[Pillar]:
    if not isinstance(value, str):
        return None
    return _PILLAR_ALIASES.get(value.lower().strip())


def repair_post(raw: Dict[str, Any], index: int) -> Optional[Post]:
    """Coerce a loosely-shaped post from the model into a valid ``Post``, or None."""
    raw_id = raw.get("id")
    title = raw.get("title")
    content = raw.get("content")
    repaired = {
        "id": raw_id if isinstance(raw_id, int) and not isinstance(raw_id, bool) else index + 1,
        "title": (title.strip() if isinstance(title, str) else "") or "Untitled Post",
        "pillar": normalize_pillar(raw.get("pillar")) or Pillar.PRODUCT,
        "status": PostStatus.REVIEW if raw.get("status") == "review" else PostStatus.READY,
        "content": content.strip() if isinstance(content, str) else "",
    }
    try:
        return Post.model_validate(repaired)
    except ValidationError:
        return None


def recover_partial_content(data: Any) -> Optional[PartialGeneratedContent]:
    """
    Salvage whatever posts are usable from a reply that failed full validation.

    Any post with non-empty content is kept. Posts whose length falls outside
    the 50-3000 character bounds are kept with status "review".
    Returns None when no platform yields a single post.
    """
    if not isinstance(data, dict):
        return None

    recovered: Dict[str, List[LibraryPost]] = {}
    has_content = False
    for platform in PLATFORM_IDS:
        posts = data.get(platform)
        recovered[platform] = []
        if not isinstance(posts, list):
            continue
        for index, raw in enumerate(posts):
            if not isinstance(raw, dict):
                continue
            raw_id = raw.get("id")
            title = raw.get("title")
            content = raw.get("content")
            text = content.strip() if isinstance(content, str) else ""
            if not text:
                continue
            recovered[platform].append(
                LibraryPost(
                    id=raw_id if isinstance(raw_id, int) and not isinstance(raw_id, bool) and raw_id > 0 else index + 1,
                    title=(title.strip() if isinstance(title, str) else "") or "Untitled",
                    pillar=normalize_pillar(raw.get("pillar")) or Pillar.PRODUCT,
                    status=PostStatus.READY if raw.get("status") != "review" and content_in_bounds(text) else PostStatus.REVIEW,
                    content=text,
                )
            )
        if recovered[platform]:
            has_content = True

    return PartialGeneratedContent(**recovered) if has_content else None


class PlatformStats(BaseModel):
    total: int
    ready: int
    review: int


class PillarStats(BaseModel):
    pillar: str
    count: int
    percentage: int


class ContentStats(CamelModel):
    total_posts: int
    by_platform: Dict[str, PlatformStats]
    by_pillar: List[PillarStats]
    ready_count: int
    review_count: int


def content_stats(content: PartialGeneratedContent) -> ContentStats:
    by_platform: Dict[str, PlatformStats] = {}
    pillar_counts: Dict[str, int] = {}
    total = ready = review = 0

    for platform, posts in content.items():
        platform_ready = sum(1 for p in posts if p.status == PostStatus.READY.value)
        platform_review = sum(1 for p in posts if p.status == PostStatus.REVIEW.value)
        by_platform[platform] = PlatformStats(
            total=len(posts), ready=platform_ready, review=platform_review
        )
        total += len(posts)
        ready += platform_ready
        review += platform_review
        for post in posts:
            pillar_counts[post.pillar] = pillar_counts.get(post.pillar, 0) + 1

    by_pillar = [
        PillarStats(
            pillar=pillar,
            count=count,
            percentage=int(count * 100 / total + 0.5) if total else 0,
        )
        for pillar, count in pillar_counts.items()
    ]
    return ContentStats(
        total_posts=total,
        by_platform=by_platform,
        by_pillar=by_pillar,
        ready_count=ready,
        review_count=review,
    )


# ---------------------------------------------------------------------------
# Model-produced analysis payloads
# ---------------------------------------------------------------------------


class ScoreDimension(BaseModel):
    score: float = 0
    feedback: str = ""


class ScoreBreakdown(BaseModel):
    hook: ScoreDimension = Field(default_factory=ScoreDimension)
    clarity: ScoreDimension = Field(default_factory=ScoreDimension)
    value: ScoreDimension = Field(default_factory=ScoreDimension)
    cta: ScoreDimension = Field(default_factory=ScoreDimension)
    length: ScoreDimension = Field(default_factory=ScoreDimension)
    readability: ScoreDimension = Field(default_factory=ScoreDimension)


class ContentScore(CamelModel):
    overall_score: float
    breakdown: ScoreBreakdown = Field(default_factory=ScoreBreakdown)
    quick_wins: List[str] = Field(default_factory=list)
    predicted_performance: str = Field(default="average", description="viral | high | average | low")
    platform_optimization: float = 0


class SpecificFix(CamelModel):
    issue: str = ""
    current_text: str = ""
    suggested_text: str = ""


class CritiqueResult(CamelModel):
    overall_score: float
    hook_score: float = 0
    clarity_score: float = 0
    cta_score: float = 0
    strengths: List[str]
    weaknesses: List[str] = Field(default_factory=list)
    specific_fixes: List[SpecificFix] = Field(default_factory=list)
    rewritten_version: str = ""


class HeadlineVariant(CamelModel):
    headline: str
    hook: str = ""
    angle: str = ""
    predicted_engagement: str = Field(default="medium", description="high | medium | low")


class HashtagSuggestion(BaseModel):
    hashtag: str
    category: str = Field(default="topic", description="industry | topic | trending | branded | engagement")
    reach: str = Field(default="medium", description="high | medium | niche")
    reason: str = ""


class HashtagResult(CamelModel):
    hashtags: List[HashtagSuggestion] = Field(default_factory=list)
    recommended_count: Optional[int] = None
    strategy: str = ""


class CalendarPost(BaseModel):
    day: str
    type: str = ""
    pillar: str = ""
    topic: str = ""
    platform: str = ""


class CalendarWeek(BaseModel):
    week: int
    month: int
    phase: str = ""
    posts: List[CalendarPost] = Field(default_factory=list)


class ExistingContentSummary(CamelModel):
    platforms: List[str] = Field(default_factory=list)
    post_count: int = 0


# ---------------------------------------------------------------------------
# API request bodies
# ---------------------------------------------------------------------------


class GenerateFullRequest(CamelModel):
    type: Literal["full"]
    form_data: FormData
    competitor_insights: Optional[str] = None


class GenerateSingleRequest(CamelModel):
    type: Literal["single"]
    form_data: FormData
    platform: Platform
    pillar: Pillar
    current_content: Optional[str] = None
    feedback: Optional[str] = None


class StreamRequest(CamelModel):
    form_data: FormData
    competitor_insights: Optional[str] = None


class ContentRequest(CamelModel):
    """Shared body for the per-post tools (score, critique, hashtags, ...)."""

    content: Optional[str] = None
    platform: Optional[str] = None
    form_data: Optional[FormData] = None


class RegenerateRequest(ContentRequest):
    feedback: Optional[str] = None


class CritiqueRequest(ContentRequest):
    competitor_benchmark: Optional[str] = None


class VariantsRequest(ContentRequest):
    num_variants: int = Field(default=3, ge=1, le=10)


class RepurposeRequest(CamelModel):
    content: Optional[str] = None
    source_platform: Optional[str] = None
    target_platform: Optional[str] = None
    form_data: Optional[FormData] = None


class CalendarRequest(CamelModel):
    form_data: Optional[FormData] = None
    existing_content: Optional[ExistingContentSummary] = None


class CompetitorResearchRequest(CamelModel):
    company_name: str = ""
    industry: str = ""
    competitors: List[str] = Field(default_factory=list)
    website: Optional[str] = None


class AutofillRequest(CamelModel):
    company_name: Optional[str] = None
    website: Optional[str] = None


class LabeledReplyRequest(BaseModel):
    text: str
