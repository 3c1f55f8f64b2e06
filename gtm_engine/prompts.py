"""
Prompt builders for every model-backed operation.

Each builder is a pure function of the company profile plus the
operation's inputs and returns the full user-turn text sent to the model.
"""

from typing import List, Optional

from .constants import (
    CALENDAR_PILLARS,
    HASHTAG_GUIDELINES,
    LANGUAGE_GUIDELINES,
    PILLAR_GUIDELINES,
    PILLARS,
    PLATFORM_CONTENT_TARGETS,
    PLATFORM_GUIDELINES,
    REWRITE_GUIDELINES,
    SCORE_CRITERIA,
    get_tone_config,
)
from .schemas import ExistingContentSummary, FormData


def _language_guideline(form: FormData) -> str:
    return LANGUAGE_GUIDELINES.get(form.content_language or "en", "")


def _optional_section(title: str, body: Optional[str], intro: str = "") -> str:
    if not body:
        return ""
    lead = f"{intro}\n" if intro else ""
    return f"\n## {title}\n{lead}{body}\n"


def build_content_prompt(
    form: FormData,
    competitor_insights: Optional[str] = None,
    custom_instructions: Optional[str] = None,
) -> str:
    tone = get_tone_config(form.content_tone)
    targets = {platform: target.target for platform, target in PLATFORM_CONTENT_TARGETS.items()}
    pillar_lines = "\n".join(
        f"- **{p.name}** ({p.pct}%): {PILLAR_GUIDELINES[p.name]}" for p in PILLARS
    )
    first_pain_point = form.pain_points.split("\n")[0]
    insights = _optional_section(
        "COMPETITOR INSIGHTS",
        competitor_insights,
        "Use these insights to differentiate and counter-position:",
    )
    custom = _optional_section("CUSTOM INSTRUCTIONS", custom_instructions)

    return f"""You are an expert B2B content strategist and copywriter. Generate a complete content library for a startup based on their company profile.

## COMPANY PROFILE

**Company:** {form.company_name}
**Website:** {form.website or "Not provided"}
**Industry:** {form.industry}

**Product/Service:**
{form.product_description}

**Target Audience:**
{form.target_audience}
- Job Titles: {form.job_titles or "Not specified"}
- Company Size: {form.company_size or "Not specified"}

**Pain Points They Solve:**
{form.pain_points}

**Unique Value Proposition:**
{form.unique_value}

**Key Benefits:**
{form.key_benefits or "Not specified"}

**Competitors:**
{form.competitors or "Not specified"}

**Pricing Model:** {form.pricing_model or "Not specified"}

**Content Tone:** {form.content_tone or "professional"}
- Typical opener style: "{tone.opener}"
- Typical CTA style: "{tone.cta}"

**Primary Goal:** {form.primary_goal}
{_language_guideline(form)}
{insights}
{custom}
## CONTENT PILLARS
Distribute content across these pillars with approximate percentages:
{pillar_lines}

## PLATFORM REQUIREMENTS

Generate content for each platform following these guidelines:

### LinkedIn ({targets["linkedin"]} posts)
{PLATFORM_GUIDELINES["linkedin"]}

### Twitter/X ({targets["twitter"]} posts)
{PLATFORM_GUIDELINES["twitter"]}

### Threads ({targets["threads"]} posts)
{PLATFORM_GUIDELINES["threads"]}

### Email ({targets["email"]} emails)
{PLATFORM_GUIDELINES["email"]}

### Ad Copy ({targets["ads"]} ads)
{PLATFORM_GUIDELINES["ads"]}

## OUTPUT FORMAT

Return ONLY valid JSON matching this exact structure. No markdown, no explanation, just JSON:

{{
  "linkedin": [
    {{"id": 1, "title": "Brief descriptive title", "pillar": "Pillar Name", "status": "ready", "content": "Full post content here..."}}
  ],
  "twitter": [...],
  "threads": [...],
  "email": [
    {{"id": 1, "title": "Subject Line Here", "pillar": "Pillar Name", "status": "ready", "content": "Email body content..."}}
  ],
  "ads": [...]
}}

## QUALITY REQUIREMENTS

1. Every post must be SPECIFIC to {form.company_name} - no generic templates
2. Reference actual pain points: {first_pain_point}
3. Include specific benefits and value props
4. Vary the hooks - don't start every post the same way
5. Mix content pillars across platforms
6. Make LinkedIn posts 1000-2000 characters
7. Twitter posts must be under 280 characters each
8. Email subject lines should create curiosity or urgency
9. Ad copy should lead with the strongest pain point

Generate the content now:"""


def build_single_post_prompt(
    form: FormData,
    platform: str,
    pillar: str,
    current_content: Optional[str] = None,
    feedback: Optional[str] = None,
) -> str:
    guidelines = PLATFORM_GUIDELINES.get(platform, "")
    pillar_guideline = PILLAR_GUIDELINES.get(pillar, "")
    current = _optional_section("CURRENT VERSION (to improve)", current_content)
    feedback_block = _optional_section("FEEDBACK TO ADDRESS", feedback)

    return f"""You are an expert B2B content strategist. Generate a single {platform} post for {form.company_name}.

## COMPANY CONTEXT
- Product: {form.product_description}
- Audience: {form.target_audience}
- Pain Points: {form.pain_points}
- Value Prop: {form.unique_value}
- Tone: {form.content_tone or "professional"}
{_language_guideline(form)}
## CONTENT PILLAR: {pillar}
{pillar_guideline}

## PLATFORM GUIDELINES ({platform.upper()})
{guidelines}
{current}{feedback_block}
Return ONLY valid JSON:
{{"title": "Brief title", "pillar": "{pillar}", "status": "ready", "content": "Full post content..."}}"""


def build_regenerate_prompt(
    content: str,
    platform: str,
    form: FormData,
    feedback: Optional[str] = None,
) -> str:
    prompt = f"""You are a content writer. Rewrite the following {platform} post to make it better and more engaging.

## ORIGINAL POST
{content}

## COMPANY CONTEXT
- Company: {form.company_name}
- Industry: {form.industry or "Not specified"}
- Audience: {form.target_audience or "Not specified"}
- Tone: {form.content_tone or "professional"}
- Goal: {form.primary_goal or "engagement"}

## PLATFORM REQUIREMENTS
{REWRITE_GUIDELINES.get(platform, "Follow platform best practices.")}

"""
    if feedback:
        prompt += f"""## USER FEEDBACK
The user wants the following changes:
{feedback}

"""
        instruction = "Incorporate the user's feedback while maintaining platform best practices."
    else:
        instruction = "Improve the hook, clarity, and engagement potential while keeping the core message."

    prompt += f"""## INSTRUCTIONS
{instruction}

Return ONLY the new post content. Do not include any explanation or additional text. Just the post content ready to copy and paste."""
    return prompt


def build_repurpose_prompt(content: str, source: str, target: str, form: FormData) -> str:
    return f"""You are a content repurposing expert. Transform the following {source} content into {target} format.

## ORIGINAL {source.upper()} CONTENT
{content}

## COMPANY CONTEXT
- Company: {form.company_name}
- Industry: {form.industry or "Not specified"}
- Audience: {form.target_audience or "Not specified"}
- Tone: {form.content_tone or "professional"}

## SOURCE PLATFORM CONTEXT
Original was written for {source}:
{REWRITE_GUIDELINES.get(source, "Standard platform practices.")}

## TARGET PLATFORM REQUIREMENTS
Adapt for {target}:
{REWRITE_GUIDELINES.get(target, "Standard platform practices.")}

## TRANSFORMATION GUIDELINES
1. Preserve the core message and value proposition
2. Adjust length to match target platform norms
3. Modify tone to fit the platform culture
4. Reformat structure (paragraphs, line breaks)
5. Update CTA style for the platform
6. Add/remove hashtags as appropriate

Return ONLY the transformed content. No explanation, no markdown code blocks, just the ready-to-post content for {target}."""


def build_score_prompt(content: str, platform: str, form: FormData) -> str:
    return f"""You are a content performance analyst. Score this {platform} post against best practices.

## POST CONTENT
{content}

## COMPANY CONTEXT
- Company: {form.company_name}
- Audience: {form.target_audience}
- Goal: {form.primary_goal or "engagement"}
- Tone: {form.content_tone or "professional"}

## PLATFORM CRITERIA
{SCORE_CRITERIA.get(platform, "Standard social media best practices.")}

## SCORING RUBRIC
Score each dimension 1-10:
- **Hook (1-10)**: How attention-grabbing is the opening?
- **Clarity (1-10)**: How clear is the message?
- **Value (1-10)**: How much value does it provide to the reader?
- **CTA (1-10)**: How strong is the call-to-action or engagement driver?
- **Length (1-10)**: Is the length optimal for {platform}?
- **Readability (1-10)**: How easy is it to scan and read?

Return ONLY valid JSON:
{{
  "overallScore": 7.5,
  "breakdown": {{
    "hook": {{ "score": 8, "feedback": "Strong opening question" }},
    "clarity": {{ "score": 7, "feedback": "Message is clear but could be more focused" }},
    "value": {{ "score": 8, "feedback": "Provides actionable insight" }},
    "cta": {{ "score": 6, "feedback": "CTA could be more specific" }},
    "length": {{ "score": 9, "feedback": "Optimal length for {platform}" }},
    "readability": {{ "score": 7, "feedback": "Good use of line breaks" }}
  }},
  "quickWins": [
    "Add a specific question at the end to drive comments",
    "Shorten the second paragraph by 20%"
  ],
  "predictedPerformance": "high" | "average" | "low" | "viral",
  "platformOptimization": 85
}}"""


def build_critique_prompt(
    form: FormData,
    content: str,
    platform: str,
    competitor_benchmark: Optional[str] = None,
) -> str:
    benchmark = _optional_section(
        "COMPETITOR BENCHMARK",
        competitor_benchmark,
        "This is what competitors are doing well:",
    )
    return f"""You are a harsh but constructive content critic. Review this {platform} post for {form.company_name} and provide specific, actionable feedback.

## THE POST TO CRITIQUE
{content}

## COMPANY CONTEXT
- Product: {form.product_description}
- Audience: {form.target_audience}
- Value Prop: {form.unique_value}
- Goal: {form.primary_goal}
{benchmark}
## CRITIQUE FORMAT

Return JSON:
{{
  "overallScore": 7,
  "hookScore": 8,
  "clarityScore": 6,
  "ctaScore": 5,
  "strengths": ["What works well"],
  "weaknesses": ["What needs improvement"],
  "specificFixes": [
    {{"issue": "Problem identified", "currentText": "The problematic text", "suggestedText": "Improved version"}}
  ],
  "rewrittenVersion": "Complete rewritten post incorporating all feedback"
}}"""


def build_variants_prompt(content: str, platform: str, form: FormData, num_variants: int = 3) -> str:
    return f"""You are an expert B2B content strategist specializing in A/B testing headlines for maximum engagement.

## CURRENT POST
Platform: {platform}
Content:
{content}

## COMPANY CONTEXT
- Company: {form.company_name}
- Product: {form.product_description}
- Audience: {form.target_audience}
- Tone: {form.content_tone or "professional"}

## TASK
Generate {num_variants} alternative headline/hook variations for this {platform} post. Each variant should:
1. Take a different angle or approach
2. Maintain the same core message
3. Be optimized for {platform}'s best practices
4. Be designed for A/B testing

## HEADLINE STRATEGIES TO USE
Mix of these approaches:
- **Pattern Interrupt**: Start with unexpected statement
- **Question Hook**: Open with curiosity-inducing question
- **Statistic Lead**: Begin with compelling number
- **Contrarian**: Challenge conventional wisdom
- **Story Opener**: Start with personal narrative
- **Direct Value**: Lead with clear benefit
- **Problem Agitation**: Highlight pain point immediately

Return ONLY valid JSON:
{{
  "variants": [
    {{
      "headline": "The new headline/hook (first 1-2 sentences)",
      "hook": "The type of hook used (pattern interrupt, question, statistic, etc.)",
      "angle": "Brief description of the angle taken",
      "predictedEngagement": "high" | "medium" | "low"
    }}
  ]
}}"""


def build_hashtag_prompt(content: str, platform: str, form: FormData) -> str:
    return f"""You are a social media hashtag strategist. Generate optimal hashtags for this {platform} post.

## POST CONTENT
{content}

## COMPANY CONTEXT
- Company: {form.company_name}
- Industry: {form.industry}
- Product: {form.product_description}
- Audience: {form.target_audience}

## PLATFORM GUIDELINES
{HASHTAG_GUIDELINES.get(platform, "Standard hashtag practices apply.")}

## TASK
Generate hashtag suggestions with:
1. A mix of reach levels (high, medium, niche)
2. Relevant categories
3. Platform-appropriate quantity

Return ONLY valid JSON:
{{
  "hashtags": [
    {{
      "hashtag": "#HashtagName",
      "category": "industry" | "topic" | "trending" | "branded" | "engagement",
      "reach": "high" | "medium" | "niche",
      "reason": "Why this hashtag is recommended"
    }}
  ],
  "recommendedCount": 3,
  "strategy": "Brief explanation of the hashtag strategy for this post"
}}"""


def build_calendar_prompt(form: FormData, existing: Optional[ExistingContentSummary] = None) -> str:
    pillars = "\n".join(f"{i}. {name}" for i, name in enumerate(CALENDAR_PILLARS, start=1))
    existing_line = ""
    if existing is not None:
        existing_line = (
            f"- Existing content: {existing.post_count} posts across {', '.join(existing.platforms)}"
        )
    industry = form.industry or "technology"

    return f"""You are a content strategist creating a 12-week (90-day) content calendar for a B2B company.

## COMPANY CONTEXT
- Company: {form.company_name}
- Industry: {form.industry or "Technology"}
- Target Audience: {form.target_audience or "B2B decision makers"}
- Primary Goal: {form.primary_goal or "Lead generation"}
- Content Tone: {form.content_tone or "Professional"}
- Unique Value: {form.unique_value or "Not specified"}
{existing_line}

## CONTENT PILLARS
{pillars}

## CALENDAR STRUCTURE
Create a 12-week calendar with 3 posts per week (Monday, Wednesday, Friday).

Month 1 (Weeks 1-4): Foundation Phase - Build awareness and establish authority
Month 2 (Weeks 5-8): Growth Phase - Increase engagement and nurture leads
Month 3 (Weeks 9-12): Scale Phase - Drive conversions and expand reach

## POST TYPES
- Educational: How-to guides, tips, frameworks
- Story: Customer stories, team stories, journey posts
- Engagement: Questions, polls, industry opinions
- Promotional: Product features, offers, demos
- Trending: Industry news, trends commentary

## PLATFORMS
Rotate between: linkedin, twitter, threads, email

Return ONLY a valid JSON array with this structure:
[
  {{
    "week": 1,
    "month": 1,
    "phase": "Foundation",
    "posts": [
      {{ "day": "Mon", "type": "Educational", "pillar": "Thought Leadership", "topic": "5 trends reshaping [industry]", "platform": "linkedin" }},
      {{ "day": "Wed", "type": "Story", "pillar": "Behind the Scenes", "topic": "Why we started [company]", "platform": "twitter" }},
      {{ "day": "Fri", "type": "Engagement", "pillar": "Industry Insights", "topic": "What's your biggest challenge with X?", "platform": "linkedin" }}
    ]
  }}
]

Generate all 12 weeks with specific, actionable topic ideas tailored to {form.company_name} in the {industry} space."""


def build_competitor_research_prompt(
    company_name: str,
    industry: str,
    competitors: List[str],
    website: Optional[str] = None,
) -> str:
    site = f" (website: {website})" if website else ""
    numbered = "\n".join(f"{i}. {name}" for i, name in enumerate(competitors, start=1))

    return f"""You are a competitive intelligence analyst. Research and analyze these competitors for {company_name}, a company in the {industry} industry{site}.

## COMPETITORS TO ANALYZE
{numbered}

## YOUR TASK

Based on your knowledge of these companies, provide a comprehensive competitive analysis. For each competitor, identify:
1. Their content strategy strengths (what they do well on LinkedIn/Twitter)
2. Their weaknesses or gaps in content (opportunities for {company_name})
3. Common content patterns they use
4. Their messaging and positioning

Then provide strategic recommendations for {company_name} to differentiate.

## OUTPUT FORMAT

Return ONLY valid JSON in this exact structure:
{{
  "competitors": [
    {{
      "competitor": "Competitor Name",
      "strengths": [
        {{"strength": "What they do well", "example": "Specific example of their content"}}
      ],
      "weaknesses": [
        {{"weakness": "Gap or weakness", "opportunity": "How {company_name} can exploit this"}}
      ],
      "contentPatterns": [
        {{"pattern": "Pattern description", "frequency": "How often", "effectiveness": "High/Medium/Low"}}
      ],
      "topPerformingContent": ["Example content type that works for them"]
    }}
  ],
  "recommendedAngles": [
    {{"angle": "Content angle", "rationale": "Why this works", "differentiator": "How it sets {company_name} apart"}}
  ],
  "avoidList": [
    {{"tactic": "What to avoid", "reason": "Why it won't work"}}
  ],
  "summary": "2-3 sentence executive summary of competitive positioning opportunity for {company_name}"
}}"""


def build_autofill_prompt(company_name: str, website: Optional[str] = None) -> str:
    site = f" (website: {website})" if website else ""
    return f"""You are a business research assistant. Research the company "{company_name}"{site} and provide information to fill out a GTM (Go-To-Market) content engine form.

Based on your knowledge of this company, provide the following information. If you're not certain about something, make an educated guess based on the industry and company type. If you truly cannot determine something, leave it empty.

Return ONLY valid JSON in this exact format:

{{
  "productDescription": "2-3 sentences about what the product/service does and the problem it solves",
  "targetAudience": "Description of ideal customer profile - who buys this product",
  "jobTitles": "3-5 target job titles, comma-separated (e.g., 'CEO, VP Marketing, Head of Growth')",
  "painPoints": "Top 3 customer pain points, each on a new line",
  "uniqueValue": "What makes this company different from competitors",
  "keyBenefits": "Top 3 benefits, each on a new line",
  "competitors": "2-4 main competitors, comma-separated",
  "industry": "One of: saas, agency, ecommerce, fintech, healthtech, edtech, marketplace, coaching, other",
  "companySize": "Target customer company size: 1-10, 11-50, 51-200, 201-1000, or 1000+",
  "primaryGoal": "Most likely primary goal: leads, awareness, authority, sales, community, or hiring",
  "contentTone": "Recommended tone: professional, casual, bold, educational, or inspiring"
}}

Important:
- Be specific to {company_name}, not generic
- For pain points and benefits, put each item on a new line
- If this is a well-known company, use accurate information
- If less known, make reasonable inferences from the industry and website
- Do not make up specific metrics or claims you can't verify

Research {company_name} now and return the JSON:"""
