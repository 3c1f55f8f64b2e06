import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, List, Optional

from pydantic import ValidationError

from . import prompts
from .autofill import AutofillResult, build_autofill_result
from .competitors import CompetitorInsights
from .config import Settings, get_settings
from .json_repair import InvalidModelJSON, parse_model_json, strip_code_fence
from .llm import LLMClient, LLMError, LLMNotConfigured
from .schemas import (
    CalendarWeek,
    ContentScore,
    CritiqueResult,
    ExistingContentSummary,
    FormData,
    GeneratedContent,
    HashtagResult,
    HeadlineVariant,
    PartialGeneratedContent,
    Post,
    format_errors,
    recover_partial_content,
)
from .template_content import generate_template_content

logger = logging.getLogger(__name__)


class ContentValidationError(ValueError):
    """Model output parsed as JSON but did not have the expected shape."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


def _error_list(exc: ValidationError) -> List[Dict[str, Any]]:
    return exc.errors(include_url=False, include_context=False, include_input=False)


@dataclass
class GenerationResult:
    content: PartialGeneratedContent
    warnings: List[str] = field(default_factory=list)
    source: str = "llm"


class ContentService:
    """
    Every model-backed operation: build the prompt, call the model, parse
    the reply and validate it into the matching schema.
    """

    def __init__(self, llm: Optional[LLMClient], settings: Optional[Settings] = None) -> None:
        self.llm = llm
        self.settings = settings or get_settings()

    async def _complete(self, prompt: str, max_tokens: int) -> str:
        if self.llm is None:
            raise LLMNotConfigured()
        response = await self.llm.complete(prompt, max_tokens=max_tokens)
        return response.content

    # -- content library ----------------------------------------------------

    async def generate_full(self, form: FormData, competitor_insights: Optional[str] = None) -> GenerationResult:
        logger.info("Generating full content for %s", form.company_name)
        prompt = prompts.build_content_prompt(form, competitor_insights)
        text = await self._complete(prompt, self.settings.max_tokens_full)
        data = parse_model_json(text)
        return self._validate_library(data)

    def _validate_library(self, data: Any) -> GenerationResult:
        try:
            validated = GeneratedContent.model_validate(data)
        except ValidationError as exc:
            warnings = format_errors(exc)
            logger.error("Validation errors: %s", warnings)
            partial = recover_partial_content(data)
            if partial is None:
                raise ContentValidationError("Generated content failed validation", _error_list(exc)) from exc
            return GenerationResult(content=partial, warnings=warnings)
        return GenerationResult(content=PartialGeneratedContent.model_validate(validated.model_dump()))

    async def generate_single(
        self,
        form: FormData,
        platform: str,
        pillar: str,
        current_content: Optional[str] = None,
        feedback: Optional[str] = None,
    ) -> Post:
        prompt = prompts.build_single_post_prompt(form, platform, pillar, current_content, feedback)
        text = await self._complete(prompt, self.settings.max_tokens_default)
        parsed = parse_model_json(text, repair=False)
        if not isinstance(parsed, dict):
            raise ContentValidationError("Generated post failed validation")
        try:
            return Post.model_validate({**parsed, "id": int(time.time() * 1000)})
        except ValidationError as exc:
            raise ContentValidationError("Generated post failed validation", _error_list(exc)) from exc

    async def generate_with_fallback(
        self, form: FormData, competitor_insights: Optional[str] = None
    ) -> GenerationResult:
        """Model library when possible, otherwise the deterministic template library."""
        try:
            return await self.generate_full(form, competitor_insights)
        except (LLMError, InvalidModelJSON, ContentValidationError) as exc:
            logger.warning("AI generation failed, falling back to templates: %s", exc)
            return GenerationResult(
                content=generate_template_content(form),
                warnings=[f"AI generation unavailable ({exc}); using template content"],
                source="template",
            )

    async def stream_full(
        self, form: FormData, competitor_insights: Optional[str] = None
    ) -> AsyncIterator[Dict[str, Any]]:
        """
        Yield server-sent event payloads while the library is generated.

        Events: ``status``, ``progress`` (every N text deltas, capped at 90),
        ``chunk`` (raw text), then one of ``complete`` or ``error``.
        """
        if self.llm is None:
            raise LLMNotConfigured()
        logger.info("Starting streaming generation for %s", form.company_name)
        prompt = prompts.build_content_prompt(form, competitor_insights)
        every = self.settings.stream_progress_every

        yield {"type": "status", "message": "Starting content generation..."}
        chunks: List[str] = []
        token_count = 0
        try:
            async for text in self.llm.stream(prompt, max_tokens=self.settings.max_tokens_full):
                chunks.append(text)
                token_count += 1
                if token_count % every == 0:
                    yield {
                        "type": "progress",
                        "progress": min(90, token_count * 100 // 800),
                        "message": f"Generating content... ({token_count} tokens)",
                    }
                yield {"type": "chunk", "text": text}
        except LLMError as exc:
            logger.error("Stream error: %s", exc)
            yield {"type": "error", "error": exc.message}
            return

        yield {"type": "status", "message": "Parsing generated content..."}
        try:
            parsed = parse_model_json("".join(chunks))
        except InvalidModelJSON:
            yield {"type": "error", "error": "Failed to parse generated content"}
            return
        yield {"type": "complete", "content": parsed}

    # -- per-post tools -----------------------------------------------------

    async def regenerate(
        self, content: str, platform: str, form: FormData, feedback: Optional[str] = None
    ) -> str:
        logger.info(
            "Regenerating %s post for %s%s", platform, form.company_name, " with feedback" if feedback else ""
        )
        prompt = prompts.build_regenerate_prompt(content, platform, form, feedback)
        return strip_code_fence(await self._complete(prompt, self.settings.max_tokens_default))

    async def repurpose(self, content: str, source: str, target: str, form: FormData) -> str:
        logger.info("Repurposing %s content to %s", source, target)
        prompt = prompts.build_repurpose_prompt(content, source, target, form)
        return strip_code_fence(await self._complete(prompt, self.settings.max_tokens_default))

    async def score(self, content: str, platform: str, form: FormData) -> ContentScore:
        logger.info("Scoring %s content for %s", platform, form.company_name)
        prompt = prompts.build_score_prompt(content, platform, form)
        parsed = parse_model_json(await self._complete(prompt, self.settings.max_tokens_default))
        try:
            return ContentScore.model_validate(parsed)
        except ValidationError as exc:
            raise ContentValidationError("Invalid score response structure", _error_list(exc)) from exc

    async def critique(
        self,
        content: str,
        platform: str,
        form: FormData,
        competitor_benchmark: Optional[str] = None,
    ) -> CritiqueResult:
        logger.info("Critiquing %s post for %s", platform, form.company_name)
        prompt = prompts.build_critique_prompt(form, content, platform, competitor_benchmark)
        parsed = parse_model_json(await self._complete(prompt, self.settings.max_tokens_research))

        overall = parsed.get("overallScore") if isinstance(parsed, dict) else None
        if (
            not isinstance(overall, (int, float))
            or isinstance(overall, bool)
            or not isinstance(parsed.get("strengths"), list)
        ):
            raise ContentValidationError("Invalid critique response structure")
        try:
            return CritiqueResult.model_validate(parsed)
        except ValidationError as exc:
            raise ContentValidationError("Invalid critique response structure", _error_list(exc)) from exc

    async def variants(
        self, content: str, platform: str, form: FormData, num_variants: int = 3
    ) -> List[HeadlineVariant]:
        logger.info("Generating %d headline variants for %s", num_variants, platform)
        prompt = prompts.build_variants_prompt(content, platform, form, num_variants)
        parsed = parse_model_json(await self._complete(prompt, self.settings.max_tokens_default))
        raw_variants = parsed.get("variants") if isinstance(parsed, dict) else None
        if not isinstance(raw_variants, list):
            raise ContentValidationError("Invalid variants response structure")
        try:
            return [HeadlineVariant.model_validate(item) for item in raw_variants]
        except ValidationError as exc:
            raise ContentValidationError("Invalid variants response structure", _error_list(exc)) from exc

    async def hashtags(self, content: str, platform: str, form: FormData) -> HashtagResult:
        logger.info("Generating hashtag suggestions for %s", platform)
        prompt = prompts.build_hashtag_prompt(content, platform, form)
        parsed = parse_model_json(await self._complete(prompt, self.settings.max_tokens_hashtags))
        try:
            return HashtagResult.model_validate(parsed)
        except ValidationError as exc:
            raise ContentValidationError("Invalid hashtags response structure", _error_list(exc)) from exc

    # -- planning and research ----------------------------------------------

    async def calendar(
        self, form: FormData, existing: Optional[ExistingContentSummary] = None
    ) -> List[CalendarWeek]:
        logger.info("Generating calendar for %s", form.company_name)
        prompt = prompts.build_calendar_prompt(form, existing)
        parsed = parse_model_json(await self._complete(prompt, self.settings.max_tokens_calendar), "array")
        if not isinstance(parsed, list):
            raise ContentValidationError("Invalid calendar response structure")
        try:
            return [CalendarWeek.model_validate(week) for week in parsed]
        except ValidationError as exc:
            raise ContentValidationError("Invalid calendar response structure", _error_list(exc)) from exc

    async def competitors(
        self,
        company_name: str,
        industry: str,
        names: List[str],
        website: Optional[str] = None,
    ) -> CompetitorInsights:
        logger.info("Analyzing competitors for %s: %s", company_name, names)
        prompt = prompts.build_competitor_research_prompt(company_name, industry, names, website)
        parsed = parse_model_json(await self._complete(prompt, self.settings.max_tokens_research))
        if not isinstance(parsed, dict):
            raise ContentValidationError("Invalid competitor analysis structure")
        parsed["generatedAt"] = datetime.now(timezone.utc)
        try:
            return CompetitorInsights.model_validate(parsed)
        except ValidationError as exc:
            raise ContentValidationError("Invalid competitor analysis structure", _error_list(exc)) from exc

    async def autofill(self, company_name: str, website: Optional[str] = None) -> AutofillResult:
        started = time.perf_counter()
        logger.info("Starting autofill research for %s (%s)", company_name, website or "no website")
        prompt = prompts.build_autofill_prompt(company_name, website)
        parsed = parse_model_json(await self._complete(prompt, self.settings.max_tokens_research))
        if not isinstance(parsed, dict):
            raise ContentValidationError("Autofill response was not a JSON object")
        result = build_autofill_result(parsed)
        logger.info(
            "Autofill completed for %s in %d ms - quality: %s (%d%%)",
            company_name,
            int((time.perf_counter() - started) * 1000),
            result.data_quality,
            result.completeness.percentage,
        )
        return result
