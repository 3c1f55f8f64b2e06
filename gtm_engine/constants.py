"""
Static domain tables: platforms, content pillars, industries, tones, goals.

Everything the prompt builders, validators and the dashboard need to agree on
lives here so the numbers only exist once.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class Platform(str, Enum):
    LINKEDIN = "linkedin"
    TWITTER = "twitter"
    THREADS = "threads"
    EMAIL = "email"
    ADS = "ads"

    @property
    def display_name(self) -> str:
        names = {
            "linkedin": "LinkedIn",
            "twitter": "Twitter/X",
            "threads": "Threads",
            "email": "Email",
            "ads": "Ad Copy",
        }
        return names[self.value]

    @property
    def color(self) -> str:
        colors = {
            "linkedin": "#2563eb",
            "twitter": "#000000",
            "threads": "#9333ea",
            "email": "#16a34a",
            "ads": "#f97316",
        }
        return colors.get(self.value, "#6b7280")


PLATFORM_IDS: List[str] = [p.value for p in Platform]


class Pillar(str, Enum):
    PRODUCT = "Product Journey"
    FOUNDER = "Founder Story"
    METRICS = "Growth Metrics"
    INSIGHTS = "Industry Insights"
    COMMUNITY = "Community Wins"
    CULTURE = "Culture/BTS"
    ENGAGEMENT = "Engagement"

    @property
    def id(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class PillarConfig:
    pillar: Pillar
    pct: int
    color: str
    desc: str

    @property
    def id(self) -> str:
        return self.pillar.id

    @property
    def name(self) -> str:
        return self.pillar.value


PILLARS: List[PillarConfig] = [
    PillarConfig(Pillar.PRODUCT, 20, "#3b82f6", "Features, launches, how it works"),
    PillarConfig(Pillar.FOUNDER, 15, "#a855f7", "Origin, vision, lessons"),
    PillarConfig(Pillar.METRICS, 15, "#22c55e", "Milestones, wins, traction"),
    PillarConfig(Pillar.INSIGHTS, 20, "#f59e0b", "Trends, education"),
    PillarConfig(Pillar.COMMUNITY, 15, "#ec4899", "Customer stories"),
    PillarConfig(Pillar.CULTURE, 10, "#06b6d4", "Team, behind-the-scenes"),
    PillarConfig(Pillar.ENGAGEMENT, 5, "#ef4444", "Polls, questions"),
]

PILLAR_NAMES: List[str] = [p.value for p in Pillar]


def get_pillar(pillar_id: str) -> Optional[PillarConfig]:
    return next((p for p in PILLARS if p.id == pillar_id), None)


def target_post_count(pillar_id: str, total_posts: int) -> int:
    """Posts a pillar should get out of ``total_posts`` given its target share."""
    config = get_pillar(pillar_id)
    pct = config.pct if config else 0
    # Math.round semantics: halves round up
    return int(total_posts * pct / 100 + 0.5)


@dataclass(frozen=True)
class ContentTarget:
    min: int
    max: int
    target: int


PLATFORM_CONTENT_TARGETS: Dict[str, ContentTarget] = {
    "linkedin": ContentTarget(min=15, max=25, target=20),
    "twitter": ContentTarget(min=8, max=15, target=10),
    "threads": ContentTarget(min=3, max=5, target=3),
    "email": ContentTarget(min=4, max=6, target=5),
    "ads": ContentTarget(min=4, max=6, target=5),
}


@dataclass(frozen=True)
class CharacterLimit:
    optimal: int
    max: int
    label: str


PLATFORM_LIMITS: Dict[str, CharacterLimit] = {
    "linkedin": CharacterLimit(optimal=1300, max=3000, label="LinkedIn"),
    "twitter": CharacterLimit(optimal=240, max=280, label="X/Twitter"),
    "threads": CharacterLimit(optimal=400, max=500, label="Threads"),
    "email": CharacterLimit(optimal=1500, max=2500, label="Email"),
    "ads": CharacterLimit(optimal=90, max=125, label="Ad Copy"),
}


class Industry(str, Enum):
    SAAS = "saas"
    AGENCY = "agency"
    ECOMMERCE = "ecommerce"
    FINTECH = "fintech"
    HEALTHTECH = "healthtech"
    EDTECH = "edtech"
    MARKETPLACE = "marketplace"
    COACHING = "coaching"
    OTHER = "other"

    @property
    def label(self) -> str:
        return INDUSTRY_LABELS[self.value]


INDUSTRY_LABELS: Dict[str, str] = {
    "saas": "B2B SaaS",
    "agency": "Agency / Consulting",
    "ecommerce": "E-commerce",
    "fintech": "Fintech",
    "healthtech": "Healthtech",
    "edtech": "Edtech",
    "marketplace": "Marketplace",
    "coaching": "Coaching / Info Products",
    "other": "Other",
}


class ContentTone(str, Enum):
    PROFESSIONAL = "professional"
    CASUAL = "casual"
    BOLD = "bold"
    EDUCATIONAL = "educational"
    INSPIRING = "inspiring"


@dataclass(frozen=True)
class ToneConfig:
    opener: str
    cta: str
    label: str
    description: str


TONE_CONFIGS: Dict[str, ToneConfig] = {
    "professional": ToneConfig("Here's what I've learned:", "Thoughts?", "Professional", "Polished and business-focused"),
    "casual": ToneConfig("Real talk:", "What do you think?", "Casual", "Friendly and conversational"),
    "bold": ToneConfig("Unpopular opinion:", "Fight me on this 👇", "Bold", "Direct and opinionated"),
    "educational": ToneConfig("Let me break this down:", "Save this for later.", "Educational", "Informative and instructive"),
    "inspiring": ToneConfig("This changed everything for me:", "Your turn.", "Inspiring", "Motivational and uplifting"),
}


def get_tone_config(tone: Optional[str]) -> ToneConfig:
    return TONE_CONFIGS.get(tone or "", TONE_CONFIGS["professional"])


class PrimaryGoal(str, Enum):
    LEADS = "leads"
    AWARENESS = "awareness"
    AUTHORITY = "authority"
    SALES = "sales"
    COMMUNITY = "community"
    HIRING = "hiring"


GOAL_OPTIONS: Dict[str, Dict[str, str]] = {
    "leads": {"label": "Generate Leads", "description": "Drive signups and demo requests"},
    "awareness": {"label": "Build Awareness", "description": "Increase brand visibility"},
    "authority": {"label": "Establish Authority", "description": "Position as industry expert"},
    "sales": {"label": "Drive Sales", "description": "Convert prospects to customers"},
    "community": {"label": "Build Community", "description": "Foster engagement and loyalty"},
    "hiring": {"label": "Attract Talent", "description": "Recruit top candidates"},
}

GOAL_CTAS: Dict[str, str] = {
    "leads": "Want to see how? Link in comments.",
    "awareness": "Follow for more insights like this.",
    "authority": "Agree or disagree? Let's discuss.",
    "sales": 'DM me "INFO" to learn more.',
    "community": "Join our community - link in bio.",
    "hiring": "We're hiring. Check out our careers page.",
}

COMPANY_SIZE_OPTIONS = [
    ("1-10", "1-10 employees"),
    ("11-50", "11-50 employees"),
    ("51-200", "51-200 employees"),
    ("201-500", "201-500 employees"),
    ("501-1000", "501-1000 employees"),
    ("1000+", "1000+ employees"),
]

FREQUENCY_OPTIONS = [
    ("daily", "Daily"),
    ("2-3x/week", "2-3 times per week"),
    ("weekly", "Weekly"),
    ("biweekly", "Bi-weekly"),
    ("monthly", "Monthly"),
    ("rarely", "Rarely/Never"),
]

TEAM_SIZE_OPTIONS = [
    ("solo", "Solo founder"),
    ("2-5", "2-5 people"),
    ("6-10", "6-10 people"),
    ("11-25", "11-25 people"),
    ("26+", "26+ people"),
]

CHANNEL_OPTIONS = [
    ("linkedin", "LinkedIn"),
    ("twitter", "Twitter/X"),
    ("instagram", "Instagram"),
    ("facebook", "Facebook"),
    ("youtube", "YouTube"),
    ("tiktok", "TikTok"),
    ("email", "Email Newsletter"),
    ("blog", "Blog/Website"),
    ("podcast", "Podcast"),
    ("none", "None currently"),
]

LANGUAGE_OPTIONS = [
    ("en", "English"),
    ("es", "Spanish"),
    ("fr", "French"),
    ("de", "German"),
    ("pt", "Portuguese"),
    ("it", "Italian"),
    ("nl", "Dutch"),
    ("ja", "Japanese"),
    ("ko", "Korean"),
    ("zh", "Chinese"),
]


# ---------------------------------------------------------------------------
# Writing guidelines fed into prompts
# ---------------------------------------------------------------------------

def _language_block(language: str, lines: List[str]) -> str:
    bullets = "\n".join(f"- {line}" for line in lines)
    return f"\n## LANGUAGE REQUIREMENTS\n- Write ALL content in fluent, natural {language}\n{bullets}"


LANGUAGE_GUIDELINES: Dict[str, str] = {
    "en": "",
    "es": _language_block("Spanish (Español)", [
        "Use appropriate regional neutral Spanish that works across Latin America and Spain",
        "Adapt idioms and expressions to feel natural in Spanish",
        "Maintain professional tone while respecting Spanish linguistic conventions",
    ]),
    "fr": _language_block("French (Français)", [
        "Use modern, professional French appropriate for business communication",
        "Adapt expressions to feel natural for French-speaking audiences",
        'Maintain the formal "vous" form for professional content',
    ]),
    "de": _language_block("German (Deutsch)", [
        "Use Sie-form for professional tone",
        "Adapt expressions to feel natural for German-speaking markets",
        "Follow German conventions for business communication",
    ]),
    "pt": _language_block("Portuguese (Português)", [
        "Use Brazilian Portuguese style unless specified otherwise",
        "Adapt expressions to feel natural for Portuguese-speaking audiences",
        "Maintain professional tone with appropriate formality",
    ]),
    "it": _language_block("Italian (Italiano)", [
        "Use appropriate formal register for professional content",
        "Adapt expressions to feel natural for Italian audiences",
        "Follow Italian business communication conventions",
    ]),
    "nl": _language_block("Dutch (Nederlands)", [
        "Use appropriate professional tone for business communication",
        "Adapt expressions to feel natural for Dutch-speaking audiences",
    ]),
    "ja": _language_block("Japanese (日本語)", [
        "Use appropriate politeness levels (丁寧語) for professional content",
        "Adapt to Japanese business communication conventions",
        "Consider cultural context and expression styles",
    ]),
    "ko": _language_block("Korean (한국어)", [
        "Use appropriate honorifics and politeness levels for business",
        "Adapt expressions to Korean business communication style",
        "Consider cultural nuances in content presentation",
    ]),
    "zh": _language_block("Simplified Chinese (简体中文)", [
        "Use appropriate formal register for professional content",
        "Adapt expressions to feel natural for Chinese audiences",
        "Consider cultural context and business communication norms",
    ]),
}

PILLAR_GUIDELINES: Dict[str, str] = {
    "Product Journey": "Product-focused content: feature announcements, how the product works, use cases, product updates, behind-the-scenes of building. Focus on solving real problems.",
    "Founder Story": "Personal founder narrative: origin story, lessons learned, failures and pivots, vision for the future, personal struggles and wins. Be authentic and vulnerable.",
    "Growth Metrics": "Traction and milestones: revenue updates, user growth, key wins, fundraising news, team growth. Use specific numbers when possible.",
    "Industry Insights": "Thought leadership: market trends, industry analysis, predictions, educational content, hot takes on industry news. Position as an expert.",
    "Community Wins": "Customer success stories: testimonials, case studies, user achievements, community highlights. Let customers be the hero.",
    "Culture/BTS": "Company culture: team highlights, office/remote life, hiring updates, values in action, day-in-the-life content. Show the human side.",
    "Engagement": "Interactive content: polls, questions, debates, fill-in-the-blank, hot takes that invite discussion. Optimize for comments.",
}

PLATFORM_GUIDELINES: Dict[str, str] = {
    "linkedin": """
- Professional but personable tone
- Hook in first line (pattern interrupt, bold statement, or question)
- Use line breaks for readability (no walls of text)
- 1300-1500 characters ideal, max 3000
- End with a question or clear CTA
- Avoid hashtags in body, add 3-5 relevant ones at the end
- Use "I" statements for authenticity""",
    "twitter": """
- Punchy, concise, high-impact
- Max 280 characters per tweet
- Hook must grab attention immediately
- Use threads for longer narratives (mark as "1/" etc)
- Conversational tone, no corporate speak
- Strategic use of emojis (1-2 max)
- No hashtags in main text unless trending""",
    "threads": """
- Casual, authentic, Instagram-adjacent tone
- More personal and raw than LinkedIn
- Storytelling format works well
- 500 characters max per post
- Behind-the-scenes content performs well
- Emoji-friendly but not excessive""",
    "email": """
- Subject line is critical (curiosity, urgency, or value)
- Personal, one-to-one feeling
- Clear single CTA per email
- Scannable with short paragraphs
- Value-first, pitch second
- 200-400 words ideal""",
    "ads": """
- Lead with the biggest pain point or desire
- Specific, measurable claims when possible
- Clear value proposition in first line
- Strong CTA (Learn More, Get Started, etc)
- A/B test hooks: question vs statement vs statistic
- Keep under 125 characters for primary text""",
}

# Shorter per-platform rules used by the rewrite and repurpose prompts.
REWRITE_GUIDELINES: Dict[str, str] = {
    "linkedin": """LinkedIn Guidelines:
- Professional but personal tone
- 1300-2000 characters optimal (max 3000)
- Use white space and line breaks
- Strong hook in first line
- 3-5 relevant hashtags at the end
- End with engagement driver (question or CTA)""",
    "twitter": """Twitter/X Guidelines:
- 240-280 characters max
- Punchy and direct
- No hashtags or max 1-2
- Strong opening hook
- Clear single point""",
    "threads": """Threads Guidelines:
- Casual, authentic tone
- 400-500 characters optimal
- Personal storytelling style
- Conversational language
- No hashtags""",
    "email": """Email Guidelines:
- Personal, one-to-one feeling
- Clear single CTA
- 200-400 words optimal
- Scannable paragraphs
- Value-first approach""",
    "ads": """Ad Copy Guidelines:
- Lead with pain point or desire
- Specific claims
- Under 125 characters primary text
- Clear value proposition
- Strong CTA""",
}

SCORE_CRITERIA: Dict[str, str] = {
    "linkedin": """LinkedIn Scoring Criteria:
- Hook: Does the first line grab attention? (pattern interrupt, question, bold statement)
- Length: Is it between 1000-2000 characters? (optimal range)
- Line breaks: Uses white space for readability?
- CTA: Clear engagement driver at the end?
- Hashtags: 3-5 relevant tags?
- Professional yet personal tone?""",
    "twitter": """Twitter/X Scoring Criteria:
- Hook: Immediate attention in first line
- Length: Under 280 characters per tweet
- Punchy and concise
- Clear point or value
- Minimal hashtags (0-2)""",
    "threads": """Threads Scoring Criteria:
- Authentic, casual tone
- Storytelling format
- Under 500 characters
- Personal perspective
- Conversational style""",
    "email": """Email Scoring Criteria:
- Subject line (if title) creates curiosity
- Personal, one-to-one feeling
- Clear single CTA
- Scannable paragraphs
- Value-first approach
- 200-400 words optimal""",
    "ads": """Ad Copy Scoring Criteria:
- Pain point or desire lead
- Specific claims
- Clear value proposition
- Strong CTA
- Under 125 characters primary text""",
}

HASHTAG_GUIDELINES: Dict[str, str] = {
    "linkedin": """LinkedIn best practices:
- 3-5 hashtags maximum for best reach
- Mix of broad industry and specific niche tags
- Place at end of post, not in body
- Include at least one high-reach hashtag""",
    "twitter": """Twitter/X best practices:
- 1-2 hashtags maximum (more hurts engagement)
- Can be woven into content naturally
- Focus on trending or community hashtags
- Avoid hashtag spam""",
    "threads": """Threads best practices:
- 0-2 hashtags (platform de-emphasizes them)
- Only use if highly relevant
- Natural placement preferred""",
    "instagram": """Instagram best practices:
- Up to 5 hashtags for best engagement
- Mix of popular and niche
- Research competitor hashtags
- Include location if relevant""",
}

CALENDAR_PILLARS: List[str] = [
    "Thought Leadership",
    "Product Updates",
    "Industry Insights",
    "Customer Stories",
    "Behind the Scenes",
]

DEFAULT_AUTOFILL_PLATFORMS: List[str] = ["linkedin", "twitter", "email"]
