import csv
import io
import json
import logging
import re
import time
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ValidationError

from .competitors import CompetitorInsights
from .constants import PILLARS, PLATFORM_IDS, PLATFORM_LIMITS, Platform
from .schemas import (
    AppData,
    CalendarPost,
    CalendarWeek,
    FormData,
    LibraryPost,
    PartialGeneratedContent,
    Post,
    PostStatus,
)

logger = logging.getLogger(__name__)

CSV_HEADER = ["Platform", "ID", "Title", "Pillar", "Status", "Content"]

_MARKDOWN_HEADER = re.compile(r"^#+\s")


class WorkspaceError(ValueError):
    """Raised for operations on posts or payloads the workspace cannot accept."""


class CharacterReport(BaseModel):
    length: int
    optimal: int
    max: int
    label: str
    over_optimal: bool
    over_max: bool


def post_key(platform: str, post_id: int) -> str:
    return f"{platform}-{post_id}"


def character_report(platform: str, text: str) -> Optional[CharacterReport]:
    limit = PLATFORM_LIMITS.get(platform)
    if limit is None:
        return None
    length = len(text)
    return CharacterReport(
        length=length,
        optimal=limit.optimal,
        max=limit.max,
        label=limit.label,
        over_optimal=length > limit.optimal,
        over_max=length > limit.max,
    )


def format_post(text: str, fmt: str = "plain") -> str:
    """Render post text for copying as plain text, Markdown or HTML."""
    if fmt == "markdown":
        lines = []
        for line in text.split("\n"):
            if _MARKDOWN_HEADER.match(line):
                lines.append(line)
            elif 0 < len(line) < 50 and not line.startswith("-"):
                lines.append(f"**{line}**")
            else:
                lines.append(line)
        return "\n\n".join(lines)
    if fmt == "html":
        paragraphs = text.split("\n\n")
        return "\n".join(f"<p>{para.replace(chr(10), '<br>')}</p>" for para in paragraphs)
    return text


def filter_posts(
    posts: Iterable[LibraryPost],
    pillar: Optional[str] = None,
    search: Optional[str] = None,
) -> List[LibraryPost]:
    result = list(posts)
    if pillar and pillar != "all":
        needle = pillar.lower()
        result = [p for p in result if needle in p.pillar.lower()]
    if search:
        needle = search.lower()
        result = [p for p in result if needle in p.title.lower() or needle in p.content.lower()]
    return result


def validate_import_data(data: Any) -> bool:
    if not isinstance(data, dict):
        return False
    if not isinstance(data.get("formData"), dict):
        return False
    content = data.get("generatedContent")
    if not isinstance(content, dict):
        return False
    if not isinstance(data.get("readyState"), bool):
        return False
    return all(isinstance(content.get(platform), list) for platform in PLATFORM_IDS)


class DailyTask(BaseModel):
    id: int
    category: str
    text: str
    time: str
    priority: str


def daily_tasks(form: FormData) -> List[DailyTask]:
    first_platform = "LinkedIn"
    if form.target_platforms and form.target_platforms[0] in PLATFORM_IDS:
        first_platform = Platform(form.target_platforms[0]).display_name
    rows = [
        ("Content", f"Post 1 piece on {first_platform}", "9:00 AM", "high"),
        ("Engagement", "Comment on 10 posts from ICP", "9:30 AM", "high"),
        ("Engagement", "Reply to yesterday's comments", "10:00 AM", "medium"),
        ("Outreach", "Send 5 connection requests", "11:00 AM", "medium"),
        ("Content", "Schedule tomorrow's content", "2:00 PM", "high"),
        ("Analytics", "Review yesterday's performance", "4:00 PM", "low"),
    ]
    return [
        DailyTask(id=index, category=cat, text=text, time=when, priority=pri)
        for index, (cat, text, when, pri) in enumerate(rows, start=1)
    ]


def default_calendar() -> List[CalendarWeek]:
    """Static 12-week plan shown until a model-built calendar replaces it."""
    weeks = []
    for i in range(12):
        phase = "Foundation" if i < 4 else "Growth" if i < 8 else "Scale"
        posts = [
            CalendarPost(day="Mon", type="Educational", pillar=PILLARS[i % 7].name),
            CalendarPost(day="Wed", type="Story", pillar=PILLARS[(i + 2) % 7].name),
            CalendarPost(day="Fri", type="Engagement", pillar=PILLARS[(i + 4) % 7].name),
        ]
        weeks.append(CalendarWeek(week=i + 1, month=i // 4 + 1, phase=phase, posts=posts))
    return weeks


def export_csv(content: PartialGeneratedContent) -> Tuple[str, int]:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    total = 0
    for platform, posts in content.items():
        for post in posts:
            writer.writerow([
                platform,
                str(post.id),
                post.title,
                post.pillar,
                post.status or PostStatus.READY.value,
                post.content.replace("\n", " "),
            ])
            total += 1
    return buffer.getvalue().rstrip("\n"), total


def export_json(content: PartialGeneratedContent, company: str) -> Tuple[str, int]:
    summary = {platform: len(posts) for platform, posts in content.items()}
    payload = {
        "exportDate": datetime.now(timezone.utc).isoformat(),
        "company": company,
        "content": content.model_dump(by_alias=True, mode="json"),
        "summary": summary,
    }
    return json.dumps(payload, indent=2, ensure_ascii=False), sum(summary.values())


def export_filename(company: str, extension: str) -> str:
    millis = int(time.time() * 1000)
    return f"{company or 'content'}-content-library-{millis}.{extension}"


class Workspace:
    """
    Single-user working state: the onboarding answers, the generated
    library, daily task checks and cached competitor insights.

    Held in memory for the lifetime of the process; export/import is how
    state moves between sessions.
    """

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.form = FormData()
        self.content: Optional[PartialGeneratedContent] = None
        self.daily_tasks: Dict[int, bool] = {}
        self.ready = False
        self.insights: Optional[CompetitorInsights] = None
        self.calendar: Optional[List[CalendarWeek]] = None
        self.warnings: List[str] = []
        logger.info("Workspace reset")

    # -- form ---------------------------------------------------------------

    def update_form(self, updates: Dict[str, Any]) -> FormData:
        merged = self.form.model_dump()
        merged.update(updates)
        self.form = FormData.model_validate(merged)
        return self.form

    # -- content ------------------------------------------------------------

    def set_content(self, content: PartialGeneratedContent, warnings: Optional[List[str]] = None) -> None:
        self.content = content
        self.warnings = list(warnings or [])
        self.ready = True
        logger.info("Workspace content set (%d posts, %d warnings)", content.total(), len(self.warnings))

    def _require_content(self) -> PartialGeneratedContent:
        if self.content is None:
            raise WorkspaceError("No generated content yet")
        return self.content

    def get_post(self, platform: str, post_id: int) -> LibraryPost:
        if platform not in PLATFORM_IDS:
            raise WorkspaceError(f"Unknown platform: {platform}")
        for post in self._require_content().posts_for(platform):
            if post.id == post_id:
                return post
        raise WorkspaceError(f"Post {post_key(platform, post_id)} not found")

    def replace_post(self, platform: str, post_id: int, new_post: LibraryPost) -> LibraryPost:
        posts = self._require_content().posts_for(platform)
        for index, post in enumerate(posts):
            if post.id == post_id:
                posts[index] = new_post
                return new_post
        raise WorkspaceError(f"Post {post_key(platform, post_id)} not found")

    def edit_post(
        self,
        platform: str,
        post_id: int,
        *,
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> LibraryPost:
        current = self.get_post(platform, post_id)
        data = current.model_dump()
        if title is not None:
            data["title"] = title
        if content is not None:
            data["content"] = content
        # New content must meet the generated-post bounds; a title-only edit
        # keeps a recovered post's content as it is.
        model = Post if data["content"] != current.content else LibraryPost
        updated = model.model_validate(data)
        return self.replace_post(platform, post_id, updated)

    def toggle_status(self, platform: str, post_id: int) -> LibraryPost:
        current = self.get_post(platform, post_id)
        status = PostStatus.REVIEW if current.status == PostStatus.READY.value else PostStatus.READY
        return self.replace_post(platform, post_id, current.model_copy(update={"status": status.value}))

    def delete_posts(self, keys: Iterable[str]) -> int:
        content = self._require_content()
        selected = set(keys)
        removed = 0
        for platform in PLATFORM_IDS:
            posts = content.posts_for(platform)
            kept = [p for p in posts if post_key(platform, p.id) not in selected]
            removed += len(posts) - len(kept)
            setattr(content, platform, kept)
        logger.info("Deleted %d posts", removed)
        return removed

    def filter_posts(self, platform: str, pillar: Optional[str] = None, search: Optional[str] = None) -> List[LibraryPost]:
        if self.content is None or platform not in PLATFORM_IDS:
            return []
        return filter_posts(self.content.posts_for(platform), pillar=pillar, search=search)

    # -- daily tasks --------------------------------------------------------

    def toggle_task(self, task_id: int) -> bool:
        self.daily_tasks[task_id] = not self.daily_tasks.get(task_id, False)
        return self.daily_tasks[task_id]

    # -- import / export ----------------------------------------------------

    def export_app_data(self) -> AppData:
        return AppData(
            form_data=self.form.model_dump(by_alias=True),
            generated_content=self.content or PartialGeneratedContent(),
            daily_tasks=dict(self.daily_tasks),
            ready_state=self.ready,
        )

    def import_app_data(self, data: Any) -> AppData:
        if not validate_import_data(data):
            raise WorkspaceError("Invalid import file. Please check the file format.")
        try:
            app_data = AppData.model_validate(data)
            form = FormData.model_validate(app_data.form_data)
        except ValidationError as exc:
            raise WorkspaceError(f"Invalid import file: {exc.error_count()} validation errors") from exc
        self.form = form
        self.content = app_data.generated_content
        self.daily_tasks = dict(app_data.daily_tasks)
        self.ready = app_data.ready_state
        logger.info("Imported workspace (%d posts)", self.content.total())
        return app_data


workspace = Workspace()
