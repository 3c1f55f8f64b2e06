import pytest

from gtm_engine.autofill import (
    apply_autofill,
    build_autofill_result,
    build_manual_prompt,
    calculate_completeness,
    data_quality,
    normalize_goal,
    normalize_industry,
    normalize_tone,
    parse_labeled_response,
)
from gtm_engine.schemas import FormData

from factories import make_form

LABELED_REPLY = """1. PRODUCT DESCRIPTION:
Acme turns CRM data into board-ready reports.

2. TARGET AUDIENCE:
RevOps leaders at Series A startups

3. JOB TITLES TO TARGET:
VP Sales, RevOps Manager

4. TOP 3 PAIN POINTS:
Manual reporting
Bad forecasts

5. UNIQUE VALUE PROPOSITION:
Reports in minutes, not days

6. KEY BENEFITS:
Saves time

7. MAIN COMPETITORS:
Clari, Gong

8. INDUSTRY:
SaaS

9. COMPANY SIZE TARGET:
11-50

10. PRIMARY GOAL:
Leads

11. CONTENT TONE:
Bold"""


@pytest.mark.parametrize(
    "raw, expected",
    [("E-Commerce", "ecommerce"), ("B2B SaaS", "saas"), ("Quantum", "other"), ("", None), (None, None)],
)
def test_normalize_industry(raw, expected):
    assert normalize_industry(raw) == expected


def test_normalize_goal_unknown_is_none():
    assert normalize_goal("Thought Leadership") == "authority"
    assert normalize_goal("world peace") is None


def test_normalize_tone_defaults_to_professional():
    assert normalize_tone("Friendly") == "casual"
    assert normalize_tone("weird") == "professional"
    assert normalize_tone("") is None


def test_calculate_completeness_ignores_blank_values():
    result = calculate_completeness({"productDescription": "x", "industry": "saas", "jobTitles": "  "})
    assert result.filled_fields == ["productDescription", "industry"]
    assert "jobTitles" in result.missing_fields
    assert result.percentage == 18


@pytest.mark.parametrize("pct, label", [(100, "excellent"), (90, "excellent"), (70, "good"), (40, "partial"), (39, "limited")])
def test_data_quality_bands(pct, label):
    assert data_quality(pct) == label


def test_build_autofill_result_normalizes_and_scores():
    result = build_autofill_result(
        {
            "productDescription": "Automated reporting for revenue teams",
            "targetAudience": "Revenue leaders at startups",
            "painPoints": ["Manual work", "Bad data"],
            "industry": "Software",
            "primaryGoal": "Lead Generation",
            "contentTone": "Inspirational",
        }
    )
    assert result.warnings is None
    assert result.data["industry"] == "saas"
    assert result.data["primaryGoal"] == "leads"
    assert result.data["contentTone"] == "inspiring"
    assert result.data["painPoints"] == "Manual work\nBad data"
    assert result.completeness.percentage == 55
    assert result.data_quality == "partial"
    assert result.company_found is True


def test_build_autofill_result_is_lenient_on_schema_errors():
    result = build_autofill_result({"productDescription": "short", "industry": "saas"})
    assert result.warnings
    assert result.data["productDescription"] == "short"
    assert result.company_found is False


def test_lenient_result_still_joins_list_fields():
    result = build_autofill_result({"productDescription": "short", "painPoints": ["a", "b"], "competitors": ["Gong"]})
    assert result.warnings
    assert result.data["painPoints"] == "a\nb"
    assert result.data["competitors"] == "Gong"
    form = apply_autofill(FormData(), result.data)
    assert form.pain_points == "a\nb"


def test_autofill_result_dumps_camel_case():
    body = build_autofill_result({"industry": "saas"}).model_dump(by_alias=True)
    assert set(body) == {"success", "data", "completeness", "dataQuality", "companyFound", "warnings"}
    assert "filledFields" in body["completeness"]


def test_parse_labeled_response():
    parsed = parse_labeled_response(LABELED_REPLY)
    assert parsed["productDescription"] == "Acme turns CRM data into board-ready reports."
    assert parsed["painPoints"] == "Manual reporting\nBad forecasts"
    assert parsed["competitors"] == "Clari, Gong"
    assert parsed["industry"] == "saas"
    assert parsed["companySize"] == "11-50"
    assert parsed["primaryGoal"] == "leads"
    assert parsed["contentTone"] == "bold"


def test_parse_labeled_response_missing_sections_are_blank():
    parsed = parse_labeled_response("nothing useful here")
    assert parsed["productDescription"] == ""
    assert parsed["industry"] == ""


def test_build_manual_prompt_uses_placeholders():
    prompt = build_manual_prompt(FormData())
    assert "Company: [Your Company Name]" in prompt
    assert "Website: [Your Website]" in prompt
    assert "saas, agency, ecommerce" in prompt


def test_apply_autofill_merges_and_defaults_platforms():
    form = make_form(target_platforms=[], job_titles="CEO")
    updated = apply_autofill(form, {"productDescription": "A new description here", "jobTitles": ""})
    assert updated.product_description == "A new description here"
    assert updated.job_titles == "CEO"
    assert updated.target_platforms == ["linkedin", "twitter", "email"]


def test_apply_autofill_keeps_chosen_platforms():
    form = make_form(target_platforms=["threads"])
    assert apply_autofill(form, {}).target_platforms == ["threads"]
