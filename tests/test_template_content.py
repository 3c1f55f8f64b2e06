from gtm_engine.schemas import FormData
from gtm_engine.template_content import build_context, generate_template_content

from factories import make_form


def test_template_library_covers_every_platform():
    content = generate_template_content(make_form())
    counts = {platform: len(posts) for platform, posts in content.items()}
    assert counts == {"linkedin": 8, "twitter": 6, "threads": 3, "email": 4, "ads": 4}
    assert [p.id for p in content.email] == [1, 2, 3, 4]


def test_template_posts_use_form_details():
    content = generate_template_content(make_form())
    origin = content.linkedin[0]
    assert origin.pillar == "Founder Story"
    assert "Why I built Acme Analytics" in origin.content
    assert "Manual spreadsheet reporting" in origin.content
    assert "#AcmeAnalytics #SaaS #BuildingInPublic" in origin.content


def test_template_context_defaults():
    ctx = build_context(FormData())
    assert ctx.company == "Our Company"
    assert ctx.industry == "saas"
    assert ctx.main_pain == "common challenges in your industry"
    assert len(ctx.pains) == 3
    assert ctx.hashtags == "#OurCompany #SaaS #BuildingInPublic"
    assert ctx.tone.opener == "Here's what I've learned:"


def test_template_context_pads_pain_points():
    ctx = build_context(make_form(pain_points="Only one pain", industry="fintech"))
    assert ctx.pains == ["Only one pain", "scaling efficiently", "finding the right solutions"]
    assert ctx.hashtags.endswith("#fintech #BuildingInPublic")


def test_empty_form_still_builds_valid_posts():
    content = generate_template_content(FormData())
    assert content.total() == 25
