import asyncio
import json

import pytest

from gtm_engine.generator import ContentService, ContentValidationError
from gtm_engine.json_repair import InvalidModelJSON
from gtm_engine.llm import LLMNotConfigured, LLMRateLimited
from gtm_engine.schemas import ExistingContentSummary

from factories import LONG_TEXT, FakeLLM, library_reply, make_form, make_library, make_post


def collect(agen):
    async def run():
        return [event async for event in agen]

    return asyncio.run(run())


def test_generate_full_accepts_valid_library(service, fake_llm):
    fake_llm.replies = [library_reply()]
    result = asyncio.run(service.generate_full(make_form()))
    assert result.source == "llm"
    assert result.warnings == []
    assert result.content.total() == 34
    assert fake_llm.calls[0]["max_tokens"] == 16000
    assert "Acme Analytics" in fake_llm.calls[0]["prompt"]


def test_generate_full_recovers_short_library(service, fake_llm):
    fake_llm.replies = [library_reply({"linkedin": 2, "twitter": 1})]
    result = asyncio.run(service.generate_full(make_form()))
    assert result.content.total() == 3
    assert result.warnings
    assert any(w.startswith("linkedin") for w in result.warnings)


def test_generate_full_rejects_unusable_output(service, fake_llm):
    fake_llm.replies = [json.dumps({"linkedin": "nope"})]
    with pytest.raises(ContentValidationError) as excinfo:
        asyncio.run(service.generate_full(make_form()))
    assert excinfo.value.errors


def test_generate_full_raises_on_garbage(service, fake_llm):
    fake_llm.replies = ["Sorry, I can't help with that."]
    with pytest.raises(InvalidModelJSON):
        asyncio.run(service.generate_full(make_form()))


def test_generate_single_assigns_timestamp_id(service, fake_llm):
    reply = make_post(title="Fresh", pillar="Founder Story")
    reply.pop("id")
    fake_llm.replies = [json.dumps(reply)]
    post = asyncio.run(service.generate_single(make_form(), "linkedin", "Founder Story"))
    assert post.id > 1_000_000_000_000
    assert post.pillar == "Founder Story"


def test_generate_single_does_not_repair(service, fake_llm):
    fake_llm.replies = ['{"title": "x", "pillar": "Engagement", "content": "y",}']
    with pytest.raises(InvalidModelJSON):
        asyncio.run(service.generate_single(make_form(), "twitter", "Engagement"))


def test_generate_single_rejects_unknown_pillar(service, fake_llm):
    fake_llm.replies = [json.dumps(make_post(pillar="Memes"))]
    with pytest.raises(ContentValidationError):
        asyncio.run(service.generate_single(make_form(), "twitter", "Memes"))


def test_fallback_uses_templates_on_model_error(settings):
    service = ContentService(FakeLLM(error=LLMRateLimited("Rate limit exceeded")), settings)
    result = asyncio.run(service.generate_with_fallback(make_form()))
    assert result.source == "template"
    assert result.content.total() == 25
    assert "Rate limit exceeded" in result.warnings[0]


def test_fallback_without_client(settings):
    result = asyncio.run(ContentService(None, settings).generate_with_fallback(make_form()))
    assert result.source == "template"
    assert "ANTHROPIC_API_KEY not configured" in result.warnings[0]


def test_calls_without_client_raise(settings):
    with pytest.raises(LLMNotConfigured):
        asyncio.run(ContentService(None, settings).score("text", "linkedin", make_form()))


def test_regenerate_strips_fence(service, fake_llm):
    fake_llm.replies = ["```\nNew and improved post\n```"]
    text = asyncio.run(service.regenerate("old", "linkedin", make_form(), "punchier"))
    assert text == "New and improved post"
    assert "punchier" in fake_llm.calls[0]["prompt"]


def test_repurpose_returns_plain_text(service, fake_llm):
    fake_llm.replies = ["  Thread version  "]
    assert asyncio.run(service.repurpose("src", "linkedin", "twitter", make_form())) == "Thread version"


def test_score(service, fake_llm):
    fake_llm.replies = [json.dumps({
        "overallScore": 82,
        "breakdown": {"hook": {"score": 8}},
        "quickWins": ["Shorter first line"],
        "predictedPerformance": "high",
        "platformOptimization": 90,
    })]
    score = asyncio.run(service.score(LONG_TEXT, "linkedin", make_form()))
    assert score.overall_score == 82
    assert score.quick_wins == ["Shorter first line"]


def test_score_rejects_missing_overall(service, fake_llm):
    fake_llm.replies = ['{"breakdown": {}}']
    with pytest.raises(ContentValidationError, match="Invalid score response structure"):
        asyncio.run(service.score(LONG_TEXT, "linkedin", make_form()))


@pytest.mark.parametrize(
    "reply",
    [
        {"overallScore": "8", "strengths": []},
        {"overallScore": True, "strengths": []},
        {"overallScore": 8, "strengths": "good hook"},
        ["not", "an", "object"],
    ],
)
def test_critique_rejects_bad_structure(service, fake_llm, reply):
    fake_llm.replies = [json.dumps(reply)]
    with pytest.raises(ContentValidationError, match="Invalid critique response structure"):
        asyncio.run(service.critique(LONG_TEXT, "linkedin", make_form()))


def test_critique(service, fake_llm):
    fake_llm.replies = [json.dumps({
        "overallScore": 7.5,
        "strengths": ["Clear hook"],
        "weaknesses": ["Weak CTA"],
        "specificFixes": [{"issue": "CTA", "currentText": "Thoughts?", "suggestedText": "Book a demo"}],
        "rewrittenVersion": "Better",
    })]
    critique = asyncio.run(service.critique(LONG_TEXT, "linkedin", make_form(), "Gong posts daily"))
    assert critique.overall_score == 7.5
    assert critique.specific_fixes[0].suggested_text == "Book a demo"
    assert fake_llm.calls[0]["max_tokens"] == 4000


def test_variants(service, fake_llm):
    fake_llm.replies = [json.dumps({"variants": [{"headline": "A"}, {"headline": "B", "predictedEngagement": "high"}]})]
    variants = asyncio.run(service.variants(LONG_TEXT, "linkedin", make_form(), 2))
    assert [v.headline for v in variants] == ["A", "B"]
    assert variants[1].predicted_engagement == "high"


def test_variants_requires_list(service, fake_llm):
    fake_llm.replies = ['{"variants": "A"}']
    with pytest.raises(ContentValidationError, match="Invalid variants response structure"):
        asyncio.run(service.variants(LONG_TEXT, "linkedin", make_form()))


def test_hashtags(service, fake_llm):
    fake_llm.replies = [json.dumps({
        "hashtags": [{"hashtag": "#RevOps", "category": "industry", "reach": "niche", "reason": "core"}],
        "recommendedCount": 3,
        "strategy": "Stay niche",
    })]
    result = asyncio.run(service.hashtags(LONG_TEXT, "linkedin", make_form()))
    assert result.hashtags[0].hashtag == "#RevOps"
    assert result.recommended_count == 3
    assert fake_llm.calls[0]["max_tokens"] == 1500


def test_calendar_parses_array(service, fake_llm):
    weeks = [{"week": 1, "month": 1, "phase": "Foundation", "posts": [{"day": "Mon", "topic": "Intro"}]}]
    fake_llm.replies = ["Here is your plan:\n" + json.dumps(weeks)]
    summary = ExistingContentSummary(platforms=["linkedin"], post_count=4)
    calendar = asyncio.run(service.calendar(make_form(), summary))
    assert calendar[0].posts[0].topic == "Intro"
    assert fake_llm.calls[0]["max_tokens"] == 8000
    assert "4 posts across linkedin" in fake_llm.calls[0]["prompt"]


def test_competitors_stamps_generated_at(service, fake_llm):
    fake_llm.replies = [json.dumps({
        "competitors": [{"competitor": "Gong", "strengths": [{"strength": "Data", "example": "Reports"}]}],
        "recommendedAngles": [{"angle": "Speed", "rationale": "Faster"}],
        "summary": "Crowded",
        "generatedAt": "1999-01-01T00:00:00Z",
    })]
    insights = asyncio.run(service.competitors("Acme", "saas", ["Gong"]))
    assert insights.competitors[0].competitor == "Gong"
    assert insights.generated_at.year > 1999
    assert fake_llm.calls[0]["max_tokens"] == 4000


def test_autofill(service, fake_llm):
    fake_llm.replies = [json.dumps({
        "productDescription": "Reporting automation",
        "industry": "SaaS",
        "contentTone": "bold",
    })]
    result = asyncio.run(service.autofill("Acme", "https://acme.io"))
    assert result.data["industry"] == "saas"
    assert result.data["contentTone"] == "bold"
    assert result.data["productDescription"] == "Reporting automation"


def test_autofill_requires_object(service, fake_llm):
    fake_llm.replies = ["[1, 2]"]
    with pytest.raises(ContentValidationError):
        asyncio.run(service.autofill("Acme"))


def test_stream_emits_progress_and_complete(service, fake_llm):
    reply = json.dumps(make_library({"linkedin": 1}))
    quarter = len(reply) // 4
    fake_llm.chunks = [reply[:quarter], reply[quarter:2 * quarter], reply[2 * quarter:3 * quarter], reply[3 * quarter:]]
    events = collect(service.stream_full(make_form()))
    assert [e["type"] for e in events] == [
        "status", "chunk", "progress", "chunk", "chunk", "progress", "chunk", "status", "complete",
    ]
    assert events[2]["message"] == "Generating content... (2 tokens)"
    assert events[-1]["content"]["linkedin"][0]["title"] == "Post 1"


def test_stream_reports_model_error(service, fake_llm):
    fake_llm.chunks = ["{"]
    fake_llm.error = LLMRateLimited("Rate limit exceeded")
    events = collect(service.stream_full(make_form()))
    assert events[-1] == {"type": "error", "error": "Rate limit exceeded"}
    assert all(e["type"] != "complete" for e in events)


def test_stream_reports_parse_error(service, fake_llm):
    fake_llm.chunks = ["not ", "json"]
    events = collect(service.stream_full(make_form()))
    assert events[-2]["type"] == "status"
    assert events[-1] == {"type": "error", "error": "Failed to parse generated content"}


def test_stream_requires_client(settings):
    with pytest.raises(LLMNotConfigured):
        collect(ContentService(None, settings).stream_full(make_form()))
