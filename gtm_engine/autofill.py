"""
Company-profile autofill: normalising what the model infers about a company
into values the onboarding form accepts, and scoring how much it filled.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from pydantic import Field, ValidationError

from .constants import DEFAULT_AUTOFILL_PLATFORMS, ContentTone, Industry, PrimaryGoal
from .schemas import CamelModel, FormData, format_errors

logger = logging.getLogger(__name__)

AUTOFILL_FIELDS: List[str] = [
    "productDescription",
    "targetAudience",
    "jobTitles",
    "painPoints",
    "uniqueValue",
    "keyBenefits",
    "competitors",
    "industry",
    "companySize",
    "primaryGoal",
    "contentTone",
]


class AutofillResponse(CamelModel):
    product_description: Optional[str] = Field(default=None, min_length=10)
    target_audience: Optional[str] = Field(default=None, min_length=10)
    job_titles: Optional[str] = None
    pain_points: Optional[str] = None
    unique_value: Optional[str] = None
    key_benefits: Optional[str] = None
    competitors: Optional[str] = None
    industry: Optional[Industry] = None
    company_size: Optional[str] = None
    primary_goal: Optional[PrimaryGoal] = None
    content_tone: Optional[ContentTone] = None


class Completeness(CamelModel):
    percentage: int
    filled_fields: List[str]
    missing_fields: List[str]


class AutofillResult(CamelModel):
    success: bool = True
    data: Dict[str, Any]
    completeness: Completeness
    data_quality: str
    company_found: bool
    warnings: Optional[List[str]] = None


_INDUSTRY_ALIASES: Dict[str, str] = {
    "b2b saas": "saas",
    "saas": "saas",
    "software": "saas",
    "software as a service": "saas",
    "agency": "agency",
    "consulting": "agency",
    "agency / consulting": "agency",
    "ecommerce": "ecommerce",
    "e-commerce": "ecommerce",
    "retail": "ecommerce",
    "fintech": "fintech",
    "financial technology": "fintech",
    "finance": "fintech",
    "healthtech": "healthtech",
    "health tech": "healthtech",
    "healthcare": "healthtech",
    "edtech": "edtech",
    "ed tech": "edtech",
    "education": "edtech",
    "marketplace": "marketplace",
    "platform": "marketplace",
    "coaching": "coaching",
    "info products": "coaching",
    "coaching / info products": "coaching",
    "other": "other",
}

_GOAL_ALIASES: Dict[str, str] = {
    "leads": "leads",
    "generate leads": "leads",
    "lead generation": "leads",
    "awareness": "awareness",
    "build awareness": "awareness",
    "brand awareness": "awareness",
    "authority": "authority",
    "establish authority": "authority",
    "thought leadership": "authority",
    "sales": "sales",
    "drive sales": "sales",
    "revenue": "sales",
    "community": "community",
    "build community": "community",
    "engagement": "community",
    "hiring": "hiring",
    "attract talent": "hiring",
    "recruitment": "hiring",
}

_TONE_ALIASES: Dict[str, str] = {
    "professional": "professional",
    "formal": "professional",
    "business": "professional",
    "casual": "casual",
    "friendly": "casual",
    "conversational": "casual",
    "bold": "bold",
    "contrarian": "bold",
    "bold & contrarian": "bold",
    "provocative": "bold",
    "educational": "educational",
    "informative": "educational",
    "teaching": "educational",
    "inspiring": "inspiring",
    "inspirational": "inspiring",
    "motivational": "inspiring",
}


def normalize_industry(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return _INDUSTRY_ALIASES.get(value.lower().strip(), "other")


def normalize_goal(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return _GOAL_ALIASES.get(value.lower().strip())


def normalize_tone(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return _TONE_ALIASES.get(value.lower().strip(), "professional")


_LIST_FIELDS = ("jobTitles", "painPoints", "keyBenefits", "competitors")


def normalize_autofill_fields(parsed: Dict[str, Any]) -> Dict[str, Any]:
    normalized = dict(parsed)
    for key in _LIST_FIELDS:
        # Models sometimes answer list-shaped fields with JSON arrays
        if isinstance(normalized.get(key), list):
            normalized[key] = "\n".join(str(item) for item in normalized[key])
    if normalized.get("industry"):
        normalized["industry"] = normalize_industry(str(normalized["industry"]))
    if normalized.get("primaryGoal"):
        normalized["primaryGoal"] = normalize_goal(str(normalized["primaryGoal"]))
    if normalized.get("contentTone"):
        normalized["contentTone"] = normalize_tone(str(normalized["contentTone"]))
    return normalized


def calculate_completeness(data: Dict[str, Any]) -> Completeness:
    filled: List[str] = []
    missing: List[str] = []
    for field in AUTOFILL_FIELDS:
        value = data.get(field)
        if value and str(value).strip():
            filled.append(field)
        else:
            missing.append(field)
    percentage = int(len(filled) * 100 / len(AUTOFILL_FIELDS) + 0.5)
    return Completeness(percentage=percentage, filled_fields=filled, missing_fields=missing)


def data_quality(percentage: int) -> str:
    if percentage >= 90:
        return "excellent"
    if percentage >= 70:
        return "good"
    if percentage >= 40:
        return "partial"
    return "limited"


def build_autofill_result(parsed: Dict[str, Any]) -> AutofillResult:
    """
    Normalise a parsed model reply and wrap it with completeness metadata.

    Validation is lenient: a reply that fails the schema is still returned
    (normalised, unvalidated) together with the validation messages.
    """
    normalized = normalize_autofill_fields(parsed)
    warnings: Optional[List[str]] = None
    try:
        validated = AutofillResponse.model_validate(normalized)
        data = validated.model_dump(by_alias=True, exclude_none=True, mode="json")
    except ValidationError as exc:
        warnings = format_errors(exc)
        data = normalized

    completeness = calculate_completeness(normalized)
    return AutofillResult(
        data=data,
        completeness=completeness,
        data_quality=data_quality(completeness.percentage),
        company_found=completeness.percentage > 20,
        warnings=warnings,
    )


# ---------------------------------------------------------------------------
# Manual flow: user copies a prompt into any chatbot and pastes the answer back
# ---------------------------------------------------------------------------

_LABELS: Dict[str, str] = {
    "productDescription": "PRODUCT DESCRIPTION",
    "targetAudience": "TARGET AUDIENCE",
    "jobTitles": "JOB TITLES TO TARGET",
    "painPoints": "TOP 3 PAIN POINTS",
    "uniqueValue": "UNIQUE VALUE PROPOSITION",
    "keyBenefits": "KEY BENEFITS",
    "competitors": "MAIN COMPETITORS",
    "industry": "INDUSTRY",
    "companySize": "COMPANY SIZE TARGET",
    "primaryGoal": "PRIMARY GOAL",
    "contentTone": "CONTENT TONE",
}

_LOWERCASED = {"industry", "primaryGoal", "contentTone"}


def _extract_labeled(text: str, label: str) -> str:
    # Section runs until the next "<n>." marker or the end of the text
    pattern = re.compile(rf"{re.escape(label)}[:\s]*([\s\S]*?)(?=\d+\.|$)", re.IGNORECASE)
    match = pattern.search(text)
    return match.group(1).strip() if match else ""


def parse_labeled_response(text: str) -> Dict[str, str]:
    parsed: Dict[str, str] = {}
    for field, label in _LABELS.items():
        value = _extract_labeled(text, label)
        parsed[field] = value.lower() if field in _LOWERCASED else value
    return parsed


def build_manual_prompt(form: FormData) -> str:
    company = form.company_name or "[Your Company Name]"
    website = form.website or "[Your Website]"
    industries = ", ".join(i.value for i in Industry)
    return f"""I need help filling out a GTM content engine for my company. Answer based on what you know about us:

Company: {company}
Website: {website}

Provide answers in this EXACT format:

1. PRODUCT DESCRIPTION:
[2-3 sentences about what the product/service does]

2. TARGET AUDIENCE:
[Describe the ideal customer profile]

3. JOB TITLES TO TARGET:
[3-5 job titles, comma-separated]

4. TOP 3 PAIN POINTS:
[Pain point 1]
[Pain point 2]
[Pain point 3]

5. UNIQUE VALUE PROPOSITION:
[What makes this different from competitors]

6. KEY BENEFITS:
[Benefit 1]
[Benefit 2]
[Benefit 3]

7. MAIN COMPETITORS:
[2-4 competitors, comma-separated]

8. INDUSTRY:
[One of: {industries}]

9. COMPANY SIZE TARGET:
[One of: 1-10, 11-50, 51-200, 201-1000, 1000+]

10. PRIMARY GOAL:
[One of: leads, awareness, authority, sales, community, hiring]

11. CONTENT TONE:
[One of: professional, casual, bold, educational, inspiring]"""


_FORM_FIELDS: Dict[str, str] = {
    "productDescription": "product_description",
    "targetAudience": "target_audience",
    "jobTitles": "job_titles",
    "painPoints": "pain_points",
    "uniqueValue": "unique_value",
    "keyBenefits": "key_benefits",
    "competitors": "competitors",
    "industry": "industry",
    "companySize": "company_size",
    "primaryGoal": "primary_goal",
    "contentTone": "content_tone",
}


def apply_autofill(form: FormData, data: Dict[str, Any]) -> FormData:
    """Merge non-empty autofill values into ``form``; existing values survive blanks."""
    updates: Dict[str, Any] = {}
    for key, attr in _FORM_FIELDS.items():
        value = data.get(key)
        if value:
            updates[attr] = str(value)
    if not form.target_platforms:
        updates["target_platforms"] = list(DEFAULT_AUTOFILL_PLATFORMS)
    logger.info("Applying %d autofilled fields", len(updates))
    return form.model_copy(update=updates)
