import io
import json
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List, Literal, Optional

from fastapi import Body, Depends, FastAPI, File, Form, HTTPException, Request, UploadFile, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, RedirectResponse, StreamingResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError

from .autofill import apply_autofill, build_autofill_result, build_manual_prompt, parse_labeled_response
from .competitors import format_insights_for_prompt, insights_are_stale, parse_competitors, search_queries
from .config import get_settings
from .constants import (
    CHANNEL_OPTIONS,
    COMPANY_SIZE_OPTIONS,
    FREQUENCY_OPTIONS,
    GOAL_OPTIONS,
    INDUSTRY_LABELS,
    LANGUAGE_OPTIONS,
    PILLARS,
    PLATFORM_LIMITS,
    TEAM_SIZE_OPTIONS,
    TONE_CONFIGS,
    Platform,
)
from .generator import ContentService, ContentValidationError
from .json_repair import InvalidModelJSON
from .llm import LLMError, LLMNotConfigured, close_llm_client, get_llm_client, is_available
from .schemas import (
    STEP_SCHEMAS,
    STEP_TITLES,
    AutofillRequest,
    CalendarRequest,
    CompetitorResearchRequest,
    ContentRequest,
    CritiqueRequest,
    GenerateFullRequest,
    GenerateSingleRequest,
    LabeledReplyRequest,
    RegenerateRequest,
    RepurposeRequest,
    StreamRequest,
    VariantsRequest,
    can_proceed,
    content_stats,
    format_errors,
    step_errors,
)
from .workspace import (
    WorkspaceError,
    character_report,
    daily_tasks,
    default_calendar,
    export_csv,
    export_filename,
    export_json,
    format_post,
    post_key,
    workspace,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("gtm_engine")

MISSING_CONTENT_FIELDS = "Missing required fields: content, platform, formData"
LIST_FIELDS = {"current_channels", "target_platforms"}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    await close_llm_client()


app = FastAPI(title="GTM Content Engine", version="0.1.0", lifespan=lifespan)

_settings = get_settings()
templates = Jinja2Templates(directory=_settings.templates_dir or str(Path(__file__).parent / "templates"))


def get_content_service() -> ContentService:
    settings = get_settings()
    llm = get_llm_client() if is_available(settings) else None
    return ContentService(llm, settings)


def require_llm_service(service: ContentService = Depends(get_content_service)) -> ContentService:
    if service.llm is None:
        raise LLMNotConfigured()
    return service


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------


@app.exception_handler(LLMError)
async def llm_error_handler(_: Request, exc: LLMError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(InvalidModelJSON)
async def invalid_json_handler(_: Request, exc: InvalidModelJSON) -> JSONResponse:
    return _parse_failure("Failed to parse AI response", exc)


@app.exception_handler(ContentValidationError)
async def content_validation_handler(_: Request, exc: ContentValidationError) -> JSONResponse:
    body: Dict[str, Any] = {"error": exc.message, "code": exc.code}
    if exc.errors:
        body["validationErrors"] = exc.errors
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body", "code": "INVALID_REQUEST", "details": details},
    )


def _parse_failure(message: str, exc: InvalidModelJSON, limit: int = 500) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": message, "code": exc.code, "rawResponse": exc.raw_text[:limit]},
    )


def _bad_request(message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message, **extra})


def _availability(label: str) -> dict:
    if is_available():
        return {"available": True, "message": f"{label} is available"}
    return {"available": False, "message": "ANTHROPIC_API_KEY not configured"}


# ---------------------------------------------------------------------------
# Pages: onboarding wizard
# ---------------------------------------------------------------------------


def _onboarding_context(step: int, errors: Optional[List[str]] = None) -> dict:
    form = workspace.form
    return {
        "step": step,
        "steps": STEP_TITLES,
        "form": form,
        "errors": errors or [],
        "can_proceed": can_proceed(step, form),
        "llm_available": is_available(),
        "manual_prompt": build_manual_prompt(form) if step == 1 else "",
        "industries": INDUSTRY_LABELS,
        "company_sizes": COMPANY_SIZE_OPTIONS,
        "frequencies": FREQUENCY_OPTIONS,
        "team_sizes": TEAM_SIZE_OPTIONS,
        "channels": CHANNEL_OPTIONS,
        "goals": GOAL_OPTIONS,
        "tones": TONE_CONFIGS,
        "platforms": list(Platform),
        "languages": LANGUAGE_OPTIONS,
    }


def _check_step(step: int) -> None:
    if step not in STEP_SCHEMAS:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown step {step}")


async def _complete_onboarding(service: ContentService) -> None:
    insights = workspace.insights
    if insights_are_stale(insights, max_age_days=service.settings.insights_max_age_days):
        insights = None
    result = await service.generate_with_fallback(workspace.form, format_insights_for_prompt(insights) or None)
    workspace.set_content(result.content, result.warnings)
    logger.info("Onboarding complete for %s (source=%s)", workspace.form.company_name, result.source)


@app.get("/", response_class=HTMLResponse)
async def index() -> RedirectResponse:
    target = "/dashboard" if workspace.ready and workspace.content is not None else "/onboarding/1"
    return RedirectResponse(url=target, status_code=status.HTTP_303_SEE_OTHER)


@app.get("/onboarding/{step}", response_class=HTMLResponse)
async def onboarding_view(request: Request, step: int) -> HTMLResponse:
    _check_step(step)
    return templates.TemplateResponse(request, "onboarding.html", _onboarding_context(step))


@app.post("/onboarding/autofill", response_class=HTMLResponse)
async def onboarding_autofill(
    request: Request,
    company_name: str = Form(...),
    website: Optional[str] = Form(default=None),
    service: ContentService = Depends(get_content_service),
) -> HTMLResponse:
    workspace.update_form({"company_name": company_name, "website": website or ""})
    try:
        result = await service.autofill(company_name.strip(), website or None)
    except (LLMError, InvalidModelJSON, ContentValidationError) as exc:
        logger.warning("Autofill failed for %s: %s", company_name, exc)
        return templates.TemplateResponse(
            request,
            "onboarding.html",
            _onboarding_context(1, [f"Autofill failed: {exc}"]),
            status_code=status.HTTP_502_BAD_GATEWAY,
        )
    workspace.form = apply_autofill(workspace.form, result.data)
    return RedirectResponse(url="/onboarding/1", status_code=status.HTTP_303_SEE_OTHER)


@app.post("/onboarding/autofill/manual", response_class=HTMLResponse)
async def onboarding_manual_autofill(reply: str = Form(...)) -> RedirectResponse:
    workspace.form = apply_autofill(workspace.form, parse_labeled_response(reply))
    return RedirectResponse(url="/onboarding/2", status_code=status.HTTP_303_SEE_OTHER)


@app.post("/onboarding/complete", response_class=HTMLResponse)
async def onboarding_complete(service: ContentService = Depends(get_content_service)) -> RedirectResponse:
    for step in STEP_SCHEMAS:
        if step_errors(step, workspace.form):
            return RedirectResponse(url=f"/onboarding/{step}", status_code=status.HTTP_303_SEE_OTHER)
    await _complete_onboarding(service)
    return RedirectResponse(url="/dashboard", status_code=status.HTTP_303_SEE_OTHER)


@app.post("/onboarding/{step}", response_class=HTMLResponse)
async def onboarding_submit(
    request: Request,
    step: int,
    service: ContentService = Depends(get_content_service),
) -> HTMLResponse:
    _check_step(step)
    submitted = await request.form()
    fields = list(STEP_SCHEMAS[step].model_fields)
    if step == 5:
        fields.append("content_language")

    updates: Dict[str, Any] = {}
    for name in fields:
        if name in LIST_FIELDS:
            updates[name] = [value for value in submitted.getlist(name) if value]
        elif name in submitted:
            updates[name] = str(submitted[name]).strip()
    form = workspace.update_form(updates)

    errors = step_errors(step, form)
    if errors:
        logger.info("Step %d rejected: %s", step, errors)
        return templates.TemplateResponse(
            request,
            "onboarding.html",
            _onboarding_context(step, errors),
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    if step < len(STEP_SCHEMAS):
        return RedirectResponse(url=f"/onboarding/{step + 1}", status_code=status.HTTP_303_SEE_OTHER)

    await _complete_onboarding(service)
    return RedirectResponse(url="/dashboard", status_code=status.HTTP_303_SEE_OTHER)


# ---------------------------------------------------------------------------
# Pages: dashboard
# ---------------------------------------------------------------------------


@app.get("/dashboard", response_class=HTMLResponse)
async def dashboard(
    request: Request,
    platform: str = "linkedin",
    pillar: str = "all",
    search: Optional[str] = None,
) -> HTMLResponse:
    if workspace.content is None:
        return RedirectResponse(url="/onboarding/1", status_code=status.HTTP_303_SEE_OTHER)
    posts = workspace.filter_posts(platform, pillar=pillar, search=search)
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "form": workspace.form,
            "stats": content_stats(workspace.content),
            "platforms": list(Platform),
            "pillars": PILLARS,
            "active_platform": platform,
            "active_pillar": pillar,
            "search": search or "",
            "posts": [(post, post_key(platform, post.id), character_report(platform, post.content)) for post in posts],
            "limit": PLATFORM_LIMITS.get(platform),
            "warnings": workspace.warnings,
            "tasks": daily_tasks(workspace.form),
            "task_state": workspace.daily_tasks,
            "calendar": workspace.calendar or default_calendar(),
            "insights": workspace.insights,
            "competitor_queries": [
                (competitor.name, search_queries(competitor, workspace.form.industry))
                for competitor in parse_competitors(workspace.form.competitors)
            ],
            "llm_available": is_available(),
        },
    )


def _back_to_dashboard(platform: str) -> RedirectResponse:
    return RedirectResponse(url=f"/dashboard?platform={platform}", status_code=status.HTTP_303_SEE_OTHER)


@app.post("/dashboard/posts/delete", response_class=HTMLResponse)
async def dashboard_delete_posts(
    keys: List[str] = Form(default=[]),
    platform: str = Form(default="linkedin"),
) -> RedirectResponse:
    try:
        workspace.delete_posts(keys)
    except WorkspaceError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return _back_to_dashboard(platform)


@app.post("/dashboard/posts/{platform}/{post_id}/edit", response_class=HTMLResponse)
async def dashboard_edit_post(
    platform: str,
    post_id: int,
    title: Optional[str] = Form(default=None),
    content: Optional[str] = Form(default=None),
) -> RedirectResponse:
    try:
        workspace.edit_post(platform, post_id, title=title, content=content)
    except WorkspaceError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid post: {'; '.join(format_errors(exc))}",
        ) from exc
    return _back_to_dashboard(platform)


@app.post("/dashboard/posts/{platform}/{post_id}/toggle", response_class=HTMLResponse)
async def dashboard_toggle_post(platform: str, post_id: int) -> RedirectResponse:
    try:
        workspace.toggle_status(platform, post_id)
    except WorkspaceError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return _back_to_dashboard(platform)


@app.get("/dashboard/posts/{platform}/{post_id}/copy", response_class=PlainTextResponse)
async def dashboard_copy_post(
    platform: str,
    post_id: int,
    fmt: Literal["plain", "markdown", "html"] = "plain",
) -> PlainTextResponse:
    try:
        post = workspace.get_post(platform, post_id)
    except WorkspaceError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return PlainTextResponse(format_post(post.content, fmt))


@app.post("/dashboard/posts/{platform}/{post_id}/regenerate", response_class=HTMLResponse)
async def dashboard_regenerate_post(
    platform: str,
    post_id: int,
    feedback: Optional[str] = Form(default=None),
    service: ContentService = Depends(get_content_service),
) -> RedirectResponse:
    try:
        post = workspace.get_post(platform, post_id)
        new_text = await service.regenerate(post.content, platform, workspace.form, feedback or None)
        workspace.edit_post(platform, post_id, content=new_text)
    except WorkspaceError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except LLMError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to regenerate content: {exc}",
        ) from exc
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Regenerated post is invalid: {'; '.join(format_errors(exc))}",
        ) from exc
    return _back_to_dashboard(platform)


@app.post("/dashboard/tasks/{task_id}/toggle", response_class=HTMLResponse)
async def dashboard_toggle_task(task_id: int) -> RedirectResponse:
    workspace.toggle_task(task_id)
    return RedirectResponse(url="/dashboard", status_code=status.HTTP_303_SEE_OTHER)


@app.post("/dashboard/competitors", response_class=HTMLResponse)
async def dashboard_research_competitors(
    service: ContentService = Depends(get_content_service),
) -> RedirectResponse:
    form = workspace.form
    names = [competitor.name for competitor in parse_competitors(form.competitors)]
    if not names:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No competitors provided")
    try:
        workspace.insights = await service.competitors(form.company_name, form.industry, names, form.website or None)
    except (LLMError, InvalidModelJSON, ContentValidationError) as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to analyze competitors: {exc}",
        ) from exc
    return RedirectResponse(url="/dashboard", status_code=status.HTTP_303_SEE_OTHER)


@app.post("/dashboard/calendar", response_class=HTMLResponse)
async def dashboard_build_calendar(service: ContentService = Depends(get_content_service)) -> RedirectResponse:
    try:
        workspace.calendar = await service.calendar(workspace.form)
    except (LLMError, InvalidModelJSON, ContentValidationError) as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to generate calendar: {exc}",
        ) from exc
    return RedirectResponse(url="/dashboard", status_code=status.HTTP_303_SEE_OTHER)


# ---------------------------------------------------------------------------
# Pages: settings, import / export
# ---------------------------------------------------------------------------


def _settings_context(error: Optional[str] = None) -> dict:
    return {
        "form": workspace.form,
        "total_posts": workspace.content.total() if workspace.content else 0,
        "ready": workspace.ready,
        "llm_available": is_available(),
        "model": get_settings().anthropic_model,
        "error": error,
    }


@app.get("/settings", response_class=HTMLResponse)
async def settings_view(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(request, "settings.html", _settings_context())


@app.post("/settings/import", response_class=HTMLResponse)
async def settings_import(request: Request, file: UploadFile = File(...)) -> HTMLResponse:
    raw = await file.read()
    try:
        data = json.loads(raw.decode("utf-8"))
        workspace.import_app_data(data)
    except (UnicodeDecodeError, json.JSONDecodeError):
        return templates.TemplateResponse(
            request,
            "settings.html",
            _settings_context("Failed to parse import file. Make sure it's a valid JSON file."),
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    except WorkspaceError as exc:
        return templates.TemplateResponse(
            request,
            "settings.html",
            _settings_context(str(exc)),
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    return RedirectResponse(url="/dashboard", status_code=status.HTTP_303_SEE_OTHER)


@app.post("/settings/reset", response_class=HTMLResponse)
async def settings_reset() -> RedirectResponse:
    workspace.reset()
    return RedirectResponse(url="/onboarding/1", status_code=status.HTTP_303_SEE_OTHER)


def _download(body: str, filename: str, media_type: str) -> StreamingResponse:
    return StreamingResponse(
        io.BytesIO(body.encode("utf-8")),
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _require_library():
    if workspace.content is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No generated content to export")
    return workspace.content


@app.get("/export/csv")
async def export_library_csv() -> StreamingResponse:
    text, count = export_csv(_require_library())
    logger.info("Exported %d posts as CSV", count)
    return _download(text, export_filename(workspace.form.company_name, "csv"), "text/csv;charset=utf-8")


@app.get("/export/json")
async def export_library_json() -> StreamingResponse:
    text, count = export_json(_require_library(), workspace.form.company_name)
    logger.info("Exported %d posts as JSON", count)
    return _download(text, export_filename(workspace.form.company_name, "json"), "application/json")


@app.get("/export/workspace")
async def export_workspace() -> StreamingResponse:
    data = workspace.export_app_data().model_dump(by_alias=True, mode="json")
    filename = f"gtm-engine-backup-{data['exportDate'][:10]}.json"
    return _download(json.dumps(data, indent=2, ensure_ascii=False), filename, "application/json")


# ---------------------------------------------------------------------------
# JSON API
# ---------------------------------------------------------------------------


@app.post("/api/generate")
async def api_generate(
    payload: Dict[str, Any] = Body(...),
    service: ContentService = Depends(require_llm_service),
) -> JSONResponse:
    if not payload.get("type") or not payload.get("formData"):
        return _bad_request("Missing required fields: type, formData")

    try:
        if payload["type"] == "full":
            request = GenerateFullRequest.model_validate(payload)
        elif payload["type"] == "single":
            request = GenerateSingleRequest.model_validate(payload)
        else:
            return _bad_request("Invalid request type")
    except ValidationError as exc:
        return _bad_request("Invalid request body", code="INVALID_REQUEST", details=format_errors(exc))

    if isinstance(request, GenerateSingleRequest):
        try:
            post = await service.generate_single(
                request.form_data,
                request.platform.value,
                request.pillar.value,
                request.current_content,
                request.feedback,
            )
        except InvalidModelJSON as exc:
            return _parse_failure("Failed to parse generated post", exc, limit=1000)
        return JSONResponse(content={"success": True, "post": post.model_dump(by_alias=True, mode="json")})

    try:
        result = await service.generate_full(request.form_data, request.competitor_insights)
    except InvalidModelJSON as exc:
        return _parse_failure("Failed to parse generated content", exc, limit=1000)
    workspace.update_form(request.form_data.model_dump())
    workspace.set_content(result.content, result.warnings)
    body: Dict[str, Any] = {"success": True, "content": result.content.model_dump(by_alias=True, mode="json")}
    if result.warnings:
        body["warnings"] = result.warnings
    return JSONResponse(content=body)


@app.post("/api/generate-stream")
async def api_generate_stream(
    payload: Dict[str, Any] = Body(...),
    service: ContentService = Depends(require_llm_service),
) -> StreamingResponse:
    if not payload.get("formData"):
        return _bad_request("Missing formData")
    try:
        body = StreamRequest.model_validate(payload)
    except ValidationError as exc:
        return _bad_request("Invalid request body", code="INVALID_REQUEST", details=format_errors(exc))

    async def events() -> AsyncIterator[str]:
        async for event in service.stream_full(body.form_data, body.competitor_insights):
            yield f"data: {json.dumps(event)}\n\n"

    return StreamingResponse(
        events(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )


@app.post("/api/autofill")
async def api_autofill(
    payload: AutofillRequest,
    service: ContentService = Depends(require_llm_service),
) -> JSONResponse:
    company_name = (payload.company_name or "").strip()
    if not company_name:
        return _bad_request("Company name is required", code="MISSING_COMPANY")

    website = (payload.website or "").strip() or None
    try:
        result = await service.autofill(company_name, website)
    except InvalidModelJSON as exc:
        return _parse_failure("Failed to parse AI response", exc)
    return JSONResponse(content=result.model_dump(by_alias=True, mode="json"))


@app.get("/api/autofill")
async def api_autofill_status() -> dict:
    return _availability("AI autofill")


@app.post("/api/parse-autofill")
async def api_parse_autofill(payload: LabeledReplyRequest) -> JSONResponse:
    """Parse a reply pasted back from the manual autofill prompt."""
    result = build_autofill_result(parse_labeled_response(payload.text))
    return JSONResponse(content=result.model_dump(by_alias=True, mode="json"))


@app.post("/api/regenerate")
async def api_regenerate(
    payload: RegenerateRequest,
    service: ContentService = Depends(require_llm_service),
) -> JSONResponse:
    if not payload.content or not payload.platform or payload.form_data is None:
        return _bad_request(MISSING_CONTENT_FIELDS)
    new_content = await service.regenerate(payload.content, payload.platform, payload.form_data, payload.feedback)
    return JSONResponse(content={"success": True, "newContent": new_content})


@app.post("/api/repurpose")
async def api_repurpose(
    payload: RepurposeRequest,
    service: ContentService = Depends(require_llm_service),
) -> JSONResponse:
    if (
        not payload.content
        or not payload.source_platform
        or not payload.target_platform
        or payload.form_data is None
    ):
        return _bad_request("Missing required fields")
    content = await service.repurpose(
        payload.content, payload.source_platform, payload.target_platform, payload.form_data
    )
    return JSONResponse(
        content={
            "success": True,
            "content": content,
            "sourcePlatform": payload.source_platform,
            "targetPlatform": payload.target_platform,
        }
    )


@app.post("/api/score")
async def api_score(
    payload: ContentRequest,
    service: ContentService = Depends(require_llm_service),
) -> JSONResponse:
    if not payload.content or not payload.platform or payload.form_data is None:
        return _bad_request(MISSING_CONTENT_FIELDS)
    try:
        score = await service.score(payload.content, payload.platform, payload.form_data)
    except InvalidModelJSON as exc:
        return _parse_failure("Failed to parse score response", exc)
    return JSONResponse(content={"success": True, "score": score.model_dump(by_alias=True, mode="json")})


@app.post("/api/critique")
async def api_critique(
    payload: CritiqueRequest,
    service: ContentService = Depends(require_llm_service),
) -> JSONResponse:
    if not payload.content or not payload.platform or payload.form_data is None:
        return _bad_request(MISSING_CONTENT_FIELDS)
    try:
        critique = await service.critique(
            payload.content, payload.platform, payload.form_data, payload.competitor_benchmark
        )
    except InvalidModelJSON as exc:
        return _parse_failure("Failed to parse critique response", exc)
    return JSONResponse(content={"success": True, "critique": critique.model_dump(by_alias=True, mode="json")})


@app.get("/api/critique")
async def api_critique_status() -> dict:
    return _availability("Content critique")


@app.post("/api/variants")
async def api_variants(
    payload: VariantsRequest,
    service: ContentService = Depends(require_llm_service),
) -> JSONResponse:
    if not payload.content or not payload.platform or payload.form_data is None:
        return _bad_request(MISSING_CONTENT_FIELDS)
    try:
        variants = await service.variants(payload.content, payload.platform, payload.form_data, payload.num_variants)
    except InvalidModelJSON as exc:
        return _parse_failure("Failed to parse variants response", exc)
    return JSONResponse(
        content={"success": True, "variants": [v.model_dump(by_alias=True, mode="json") for v in variants]}
    )


@app.post("/api/hashtags")
async def api_hashtags(
    payload: ContentRequest,
    service: ContentService = Depends(require_llm_service),
) -> JSONResponse:
    if not payload.content or not payload.platform or payload.form_data is None:
        return _bad_request(MISSING_CONTENT_FIELDS)
    try:
        result = await service.hashtags(payload.content, payload.platform, payload.form_data)
    except InvalidModelJSON as exc:
        return _parse_failure("Failed to parse hashtags response", exc)
    body = result.model_dump(by_alias=True, mode="json")
    return JSONResponse(content={"success": True, **body})


@app.post("/api/calendar-autofill")
async def api_calendar_autofill(
    payload: CalendarRequest,
    service: ContentService = Depends(require_llm_service),
) -> JSONResponse:
    if payload.form_data is None:
        return _bad_request("Missing formData")
    try:
        weeks = await service.calendar(payload.form_data, payload.existing_content)
    except InvalidModelJSON as exc:
        return _parse_failure("Failed to parse calendar response", exc)
    return JSONResponse(content={"success": True, "calendar": [week.model_dump(mode="json") for week in weeks]})


@app.post("/api/competitors")
async def api_competitors(
    payload: CompetitorResearchRequest,
    service: ContentService = Depends(require_llm_service),
) -> JSONResponse:
    names = [name.strip() for name in payload.competitors if name.strip()]
    if not names:
        return _bad_request("No competitors provided")
    try:
        insights = await service.competitors(payload.company_name, payload.industry, names, payload.website)
    except InvalidModelJSON as exc:
        return _parse_failure("Failed to parse competitor analysis", exc)
    workspace.insights = insights
    return JSONResponse(content={"success": True, "insights": insights.model_dump(by_alias=True, mode="json")})


@app.get("/api/competitors")
async def api_competitors_status() -> dict:
    return _availability("Competitor research")


@app.get("/health")
async def health() -> dict:
    """
    Basic health check including whether a model API key is configured.
    """
    settings = get_settings()
    configured = is_available(settings)
    outcome = {
        "status": "ok",
        "llm": "configured" if configured else "missing_api_key",
        "model": settings.anthropic_model,
    }
    logger.info("Health check result: %s", outcome)
    return outcome
