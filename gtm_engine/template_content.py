"""
Deterministic content library built straight from the onboarding form.

Used when no model is configured or a model call fails, so the dashboard
always has something to show. Every post is checked against ``Post``.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List

from .constants import GOAL_CTAS, Pillar, ToneConfig, get_tone_config
from .schemas import FormData, PartialGeneratedContent, Post, PostStatus

logger = logging.getLogger(__name__)

DEFAULT_PAIN_POINTS = [
    "common challenges in your industry",
    "scaling efficiently",
    "finding the right solutions",
]


@dataclass
class TemplateContext:
    company: str
    industry: str
    audience: str
    unique_value: str
    primary_goal: str
    pains: List[str]
    tone: ToneConfig
    hashtags: str

    @property
    def main_pain(self) -> str:
        return self.pains[0]

    @property
    def goal_cta(self) -> str:
        return GOAL_CTAS.get(self.primary_goal, GOAL_CTAS["leads"])

    @property
    def value_lead(self) -> str:
        return self.unique_value.split(".")[0] if self.unique_value else "Finally, a solution that works"


def build_context(form: FormData) -> TemplateContext:
    company = form.company_name or "Our Company"
    industry = form.industry or "saas"
    pains = form.pain_point_list()
    pains = pains + DEFAULT_PAIN_POINTS[len(pains):]
    industry_tag = "SaaS" if industry == "saas" else industry
    return TemplateContext(
        company=company,
        industry=industry,
        audience=form.target_audience,
        unique_value=form.unique_value,
        primary_goal=form.primary_goal or "leads",
        pains=pains,
        tone=get_tone_config(form.content_tone or "professional"),
        hashtags=f"#{''.join(company.split())} #{industry_tag} #BuildingInPublic",
    )


def _linkedin(ctx: TemplateContext) -> List[tuple]:
    return [
        ("Origin Story", Pillar.FOUNDER, PostStatus.READY, f"""Why I built {ctx.company}:

{ctx.main_pain}

I watched this problem destroy productivity for years. Everyone had the same complaints. Nobody was fixing it the right way.

{ctx.tone.opener}

The existing solutions were:
• Too complex for most teams
• Too expensive for the value
• Built by people who never experienced the problem

So we built {ctx.company}.

{ctx.unique_value or "We focused on what actually matters - solving the core problem without the bloat."}

What made you start your company?

{ctx.hashtags} #FounderJourney"""),
        ("Biggest Lesson", Pillar.FOUNDER, PostStatus.REVIEW, f"""The biggest lesson from building {ctx.company}:

Your first version will be embarrassing. Ship it anyway.

Our MVP had bugs everywhere and UI that made designers cry.

But we also had:
✅ Real users giving real feedback
✅ Data on what actually mattered
✅ Momentum that perfectionism kills

The gap between "ready" and "perfect" is infinite.
The gap between "shipped" and "good enough" is one iteration.

{ctx.tone.cta}

{ctx.hashtags}"""),
        ("Problem Agitation", Pillar.INSIGHTS, PostStatus.REVIEW, f"""{ctx.tone.opener}

Most {ctx.industry} companies are solving the wrong problem.

They focus on:
❌ Adding more features nobody asked for
❌ Hiring more people instead of fixing processes

When they should focus on:
✅ Understanding the real pain point
✅ Building systems that scale

{ctx.main_pain} isn't a feature problem.

It's a mindset problem.

What would you add?

{ctx.hashtags} #ThoughtLeadership"""),
        ("Framework Post", Pillar.INSIGHTS, PostStatus.READY, f"""The 4-step framework we use at {ctx.company}:

1. Define the problem (specifically)
2. Map your current state honestly
3. Design the ideal state 90 days out
4. Build the minimum viable bridge, then iterate weekly

This framework has helped {ctx.audience or "our customers"} consistently hit their goals.

The secret? It's not the framework.
It's the discipline to follow it.

Save this. You'll need it.

{ctx.hashtags} #Framework"""),
        ("Milestone Post", Pillar.METRICS, PostStatus.READY, f"""{ctx.company} update:

Every new customer this quarter came from:
• Word of mouth referrals
• Content that helped people
• Building in public

Organic works when you actually solve a real problem and help people before asking for anything.

{ctx.goal_cta}

{ctx.hashtags} #Growth"""),
        ("Customer Win", Pillar.COMMUNITY, PostStatus.READY, f"""A customer told us last week:

"We stopped worrying about {ctx.pains[1]}."

That's the whole point of {ctx.company}.

Our customers are the heroes of this story. We just handed them a better tool.

Who should we feature next?

{ctx.hashtags}"""),
        ("Team Spotlight", Pillar.CULTURE, PostStatus.REVIEW, f"""Behind the scenes at {ctx.company}:

No big office. No ping-pong table.

Just a small team obsessed with {ctx.pains[2]} for people like {ctx.audience or "our customers"}.

The culture isn't the perks. It's the standards.

{ctx.tone.cta}

{ctx.hashtags}"""),
        ("Poll", Pillar.ENGAGEMENT, PostStatus.READY, f"""Quick poll for {ctx.audience or "founders"}:

What's your biggest challenge right now?

1. {ctx.pains[0]}
2. {ctx.pains[1]}
3. {ctx.pains[2]}

Comment your number below 👇

{ctx.hashtags}"""),
    ]


def _twitter(ctx: TemplateContext) -> List[tuple]:
    return [
        ("Hook Thread", Pillar.INSIGHTS, PostStatus.READY, f"""{ctx.main_pain}?

Here's how to fix it in 30 days (without spending money on ads):

🧵👇"""),
        ("Hot Take", Pillar.INSIGHTS, PostStatus.REVIEW, f"""hot take: most {ctx.industry} companies are overcomplicating this

the answer is simpler than you think

{ctx.company} is proof"""),
        ("Lesson", Pillar.FOUNDER, PostStatus.READY, f"""biggest lesson from building {ctx.company}:

ship embarrassing work

iterate fast

perfection is a trap"""),
        ("Engagement", Pillar.ENGAGEMENT, PostStatus.REVIEW, f"""if you're a {ctx.audience or "founder"}:

what's the ONE thing holding you back right now?

reply below. i read everything."""),
        ("Value Add", Pillar.INSIGHTS, PostStatus.READY, f"""the {ctx.industry} playbook:

1. solve one problem really well
2. let customers do your marketing
3. build community, not just product"""),
        ("CTA", Pillar.PRODUCT, PostStatus.READY, f"""tired of {ctx.main_pain.lower()}?

we built {ctx.company} to fix exactly that.

{ctx.goal_cta}"""),
    ]


def _threads(ctx: TemplateContext) -> List[tuple]:
    return [
        ("Journey", Pillar.FOUNDER, PostStatus.READY, f"""How we started {ctx.company}:

The problem was clear: {ctx.main_pain}.

Everyone was doing it the hard way. We asked what it would take to do it right.

{ctx.value_lead}.

That question changed everything."""),
        ("Behind the Scenes", Pillar.CULTURE, PostStatus.REVIEW, f"""real talk from inside {ctx.company}:

most days aren't glamorous. they're emails, bug fixes and customer calls.

but every one of those calls reminds us why {ctx.pains[1]} matters."""),
        ("Question", Pillar.ENGAGEMENT, PostStatus.READY, f"""honest question for {ctx.audience or "builders"}:

how are you handling {ctx.main_pain.lower()} right now?

drop your setup below. stealing the best ideas 👀"""),
    ]


def _email(ctx: TemplateContext) -> List[tuple]:
    return [
        ("Welcome Email", Pillar.PRODUCT, PostStatus.READY, f"""Subject: Welcome to {ctx.company} - Here's what's next

Hey [First Name],

Welcome to {ctx.company}.

Over the next few days, I'll send you a quick-start guide, our best resources and tips from power users.

Questions? Just reply to this email. I read every response personally.

Talk soon,
[Your name]
Founder, {ctx.company}

P.S. {ctx.main_pain}? You're in exactly the right place."""),
        ("Value Email", Pillar.INSIGHTS, PostStatus.REVIEW, f"""Subject: The #1 mistake {ctx.audience or "most people"} make

Hey [First Name],

Quick question: are you making this mistake?

{ctx.main_pain}

Most teams try to fix it with more tools. The fix is usually fewer steps.

Here's the one change that helps the most: pick a single workflow and make it boringly reliable.

{ctx.goal_cta}

[Your name]"""),
        ("Case Study Email", Pillar.COMMUNITY, PostStatus.READY, f"""Subject: How one team stopped {ctx.pains[1]}

Hey [First Name],

One of our customers was stuck on {ctx.pains[1]} for months.

After switching to {ctx.company}, they got their week back.

{ctx.value_lead}.

Want the full story? Just reply "STORY".

[Your name]"""),
        ("Check-in Email", Pillar.ENGAGEMENT, PostStatus.READY, f"""Subject: Quick question

Hey [First Name],

I'm curious: what's the biggest thing standing between you and your goals right now?

Is it {ctx.pains[0]}? {ctx.pains[2]}? Something else?

Hit reply and tell me. I read everything.

[Your name], {ctx.company}"""),
    ]


def _ads(ctx: TemplateContext) -> List[tuple]:
    return [
        ("Problem-Agitate", Pillar.PRODUCT, PostStatus.READY, f"""[HEADLINE]
Still struggling with {ctx.main_pain.lower()}?

[BODY]
{ctx.audience or "Smart teams"} are switching to {ctx.company}.

✅ {ctx.value_lead}
✅ Setup in under 10 minutes

[CTA]
Try Free for 14 Days →"""),
        ("Social Proof", Pillar.COMMUNITY, PostStatus.REVIEW, f"""[HEADLINE]
"{ctx.company} changed everything for us."

[BODY]
Join {ctx.audience or "companies"} who've already made the switch.

[CTA]
Start Your Free Trial →"""),
        ("Curiosity", Pillar.INSIGHTS, PostStatus.READY, f"""[HEADLINE]
Why {ctx.audience or "top performers"} are ditching the old way

[BODY]
The old way of handling {ctx.main_pain.lower()} is broken.

{ctx.company} is the fix.

[CTA]
See How It Works →"""),
        ("Direct Response", Pillar.PRODUCT, PostStatus.READY, f"""[HEADLINE]
{ctx.main_pain}? There's a better way.

[BODY]
{ctx.company} helps {ctx.audience or "teams like yours"} focus on what actually matters.

No long contracts. No complex setup.

[CTA]
Get Started Free →"""),
    ]


_BUILDERS = {
    "linkedin": _linkedin,
    "twitter": _twitter,
    "threads": _threads,
    "email": _email,
    "ads": _ads,
}


def generate_template_content(form: FormData) -> PartialGeneratedContent:
    ctx = build_context(form)
    library: Dict[str, List[Post]] = {}
    for platform, builder in _BUILDERS.items():
        library[platform] = [
            Post(id=index, title=title, pillar=pillar, status=status, content=content)
            for index, (title, pillar, status, content) in enumerate(builder(ctx), start=1)
        ]
    content = PartialGeneratedContent(**library)
    logger.info("Built template library for %s (%d posts)", ctx.company, content.total())
    return content
