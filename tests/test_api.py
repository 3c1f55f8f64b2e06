import json

from gtm_engine.competitors import CompetitorInsights
from gtm_engine.llm import LLMRateLimited
from gtm_engine.schemas import PartialGeneratedContent
from gtm_engine.workspace import workspace

from factories import LONG_TEXT, library_reply, make_form, make_library, make_post


def form_payload(**overrides):
    return make_form(**overrides).model_dump(by_alias=True)


def content_payload(**extra):
    body = {"content": LONG_TEXT, "platform": "linkedin", "formData": form_payload()}
    body.update(extra)
    return body


def seed_workspace():
    workspace.form = make_form()
    workspace.set_content(PartialGeneratedContent.model_validate(make_library()))


def sse_events(text):
    return [json.loads(block[len("data: "):]) for block in text.split("\n\n") if block.strip()]


# -- service status -----------------------------------------------------------


def test_health_reports_missing_key(offline_client):
    response = offline_client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["llm"] == "missing_api_key"


def test_availability_endpoints(offline_client):
    for path in ("/api/autofill", "/api/critique", "/api/competitors"):
        body = offline_client.get(path).json()
        assert body == {"available": False, "message": "ANTHROPIC_API_KEY not configured"}


def test_model_routes_report_missing_key_first(offline_client):
    for path in ("/api/generate", "/api/score", "/api/regenerate", "/api/competitors"):
        response = offline_client.post(path, json={})
        assert response.status_code == 500
        assert response.json() == {"error": "ANTHROPIC_API_KEY not configured", "code": "NO_API_KEY"}


def test_model_errors_keep_their_status(client, fake_llm):
    fake_llm.error = LLMRateLimited("Rate limit exceeded")
    response = client.post("/api/score", json=content_payload())
    assert response.status_code == 429
    assert response.json() == {"error": "Rate limit exceeded", "code": "RATE_LIMITED"}


def test_invalid_body_is_400(client):
    response = client.post("/api/variants", json=content_payload(numVariants=50))
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_REQUEST"


# -- generation ---------------------------------------------------------------


def test_generate_requires_type_and_form(client):
    response = client.post("/api/generate", json={"type": "full"})
    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields: type, formData"


def test_generate_rejects_unknown_type(client):
    response = client.post("/api/generate", json={"type": "blog", "formData": form_payload()})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request type"


def test_generate_full_stores_library(client, fake_llm):
    fake_llm.replies = [library_reply()]
    response = client.post("/api/generate", json={"type": "full", "formData": form_payload()})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert len(body["content"]["linkedin"]) == 15
    assert "warnings" not in body
    assert workspace.ready
    assert workspace.form.company_name == "Acme Analytics"


def test_generate_full_parse_failure(client, fake_llm):
    fake_llm.replies = ["no json here"]
    response = client.post("/api/generate", json={"type": "full", "formData": form_payload()})
    assert response.status_code == 500
    assert response.json() == {
        "error": "Failed to parse generated content",
        "code": "PARSE_ERROR",
        "rawResponse": "no json here",
    }


def test_generate_full_validation_failure(client, fake_llm):
    fake_llm.replies = [json.dumps({"linkedin": "x"})]
    response = client.post("/api/generate", json={"type": "full", "formData": form_payload()})
    assert response.status_code == 500
    body = response.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert body["validationErrors"]


def test_generate_single(client, fake_llm):
    fake_llm.replies = [json.dumps(make_post(pillar="Engagement"))]
    response = client.post(
        "/api/generate",
        json={"type": "single", "formData": form_payload(), "platform": "twitter", "pillar": "Engagement"},
    )
    assert response.status_code == 200
    post = response.json()["post"]
    assert post["pillar"] == "Engagement"
    assert post["id"] > 1


def test_generate_single_rejects_unknown_platform(client):
    response = client.post(
        "/api/generate",
        json={"type": "single", "formData": form_payload(), "platform": "myspace", "pillar": "Engagement"},
    )
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_REQUEST"


def test_generate_stream(client, fake_llm):
    reply = json.dumps(make_library({"linkedin": 1}))
    fake_llm.chunks = [reply[:10], reply[10:]]
    response = client.post("/api/generate-stream", json={"formData": form_payload()})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    assert response.headers["cache-control"] == "no-cache"
    events = sse_events(response.text)
    assert [e["type"] for e in events] == ["status", "chunk", "progress", "chunk", "status", "complete"]
    assert events[-1]["content"]["linkedin"][0]["id"] == 1


def test_generate_stream_requires_form(client):
    response = client.post("/api/generate-stream", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "Missing formData"}


def test_generate_stream_checks_competitor_insights(client, fake_llm):
    response = client.post("/api/generate-stream", json={"formData": form_payload(), "competitorInsights": 123})
    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "INVALID_REQUEST"
    assert any("competitor" in detail.lower() for detail in body["details"])
    assert fake_llm.calls == []

    fake_llm.chunks = [json.dumps(make_library({"linkedin": 1}))]
    response = client.post(
        "/api/generate-stream", json={"formData": form_payload(), "competitorInsights": "Rivals ignore onboarding."}
    )
    assert response.status_code == 200
    assert "Rivals ignore onboarding." in fake_llm.calls[0]["prompt"]


# -- autofill -----------------------------------------------------------------


def test_autofill_requires_company(client):
    response = client.post("/api/autofill", json={"companyName": "  "})
    assert response.status_code == 400
    assert response.json() == {"error": "Company name is required", "code": "MISSING_COMPANY"}


def test_autofill(client, fake_llm):
    fake_llm.replies = [json.dumps({"productDescription": "Automated board reporting", "industry": "Software"})]
    response = client.post("/api/autofill", json={"companyName": "Acme", "website": "https://acme.io"})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["industry"] == "saas"
    assert body["dataQuality"] == "limited"


def test_autofill_parse_failure(client, fake_llm):
    fake_llm.replies = ["I don't know that company"]
    response = client.post("/api/autofill", json={"companyName": "Acme"})
    assert response.status_code == 500
    assert response.json()["error"] == "Failed to parse AI response"


def test_parse_autofill_works_offline(offline_client):
    reply = "1. PRODUCT DESCRIPTION:\nReporting automation for revenue teams\n\n8. INDUSTRY:\nSaaS"
    response = offline_client.post("/api/parse-autofill", json={"text": reply})
    assert response.status_code == 200
    assert response.json()["data"]["productDescription"] == "Reporting automation for revenue teams"


# -- per-post tools -----------------------------------------------------------


def test_regenerate(client, fake_llm):
    fake_llm.replies = ["```\nSharper post\n```"]
    response = client.post("/api/regenerate", json=content_payload(feedback="shorter"))
    assert response.json() == {"success": True, "newContent": "Sharper post"}


def test_regenerate_requires_fields(client):
    response = client.post("/api/regenerate", json={"content": "x"})
    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields: content, platform, formData"


def test_repurpose(client, fake_llm):
    fake_llm.replies = ["Tweet version"]
    response = client.post(
        "/api/repurpose",
        json={"content": LONG_TEXT, "sourcePlatform": "linkedin", "targetPlatform": "twitter", "formData": form_payload()},
    )
    assert response.json() == {
        "success": True,
        "content": "Tweet version",
        "sourcePlatform": "linkedin",
        "targetPlatform": "twitter",
    }


def test_repurpose_requires_fields(client):
    response = client.post("/api/repurpose", json={"content": LONG_TEXT})
    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields"


def test_score_parse_failure(client, fake_llm):
    fake_llm.replies = ["Great post, 8/10"]
    response = client.post("/api/score", json=content_payload())
    assert response.status_code == 500
    assert response.json()["error"] == "Failed to parse score response"
    assert response.json()["rawResponse"] == "Great post, 8/10"


def test_score(client, fake_llm):
    fake_llm.replies = [json.dumps({"overallScore": 71, "quickWins": ["Add a question"]})]
    body = client.post("/api/score", json=content_payload()).json()
    assert body["success"] is True
    assert body["score"]["overallScore"] == 71
    assert body["score"]["quickWins"] == ["Add a question"]


def test_critique_invalid_structure(client, fake_llm):
    fake_llm.replies = [json.dumps({"overallScore": "high", "strengths": []})]
    response = client.post("/api/critique", json=content_payload())
    assert response.status_code == 500
    assert response.json() == {"error": "Invalid critique response structure", "code": "VALIDATION_ERROR"}


def test_critique(client, fake_llm):
    fake_llm.replies = [json.dumps({"overallScore": 6, "strengths": ["Specific"], "rewrittenVersion": "Better"})]
    body = client.post("/api/critique", json=content_payload(competitorBenchmark="Gong")).json()
    assert body["critique"]["rewrittenVersion"] == "Better"
    assert "Gong" in fake_llm.calls[0]["prompt"]


def test_variants(client, fake_llm):
    fake_llm.replies = [json.dumps({"variants": [{"headline": "One"}, {"headline": "Two"}]})]
    body = client.post("/api/variants", json=content_payload(numVariants=2)).json()
    assert [v["headline"] for v in body["variants"]] == ["One", "Two"]
    assert "Generate 2 alternative" in fake_llm.calls[0]["prompt"]


def test_hashtags(client, fake_llm):
    fake_llm.replies = [json.dumps({"hashtags": [{"hashtag": "#RevOps"}], "recommendedCount": 3, "strategy": "Niche"})]
    body = client.post("/api/hashtags", json=content_payload()).json()
    assert body["success"] is True
    assert body["hashtags"][0]["hashtag"] == "#RevOps"
    assert body["recommendedCount"] == 3
    assert body["strategy"] == "Niche"


def test_hashtags_requires_fields(client):
    response = client.post("/api/hashtags", json={"platform": "linkedin"})
    assert response.status_code == 400


# -- planning and research ----------------------------------------------------


def test_calendar_requires_form(client):
    response = client.post("/api/calendar-autofill", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "Missing formData"}


def test_calendar(client, fake_llm):
    fake_llm.replies = [json.dumps([{"week": 1, "month": 1, "phase": "Foundation", "posts": [{"day": "Mon"}]}])]
    response = client.post(
        "/api/calendar-autofill",
        json={"formData": form_payload(), "existingContent": {"platforms": ["linkedin"], "postCount": 15}},
    )
    body = response.json()
    assert body["success"] is True
    assert body["calendar"][0]["phase"] == "Foundation"


def test_competitors_requires_names(client):
    response = client.post("/api/competitors", json={"companyName": "Acme", "competitors": ["  "]})
    assert response.status_code == 400
    assert response.json() == {"error": "No competitors provided"}


def test_competitors_stores_insights(client, fake_llm):
    fake_llm.replies = [json.dumps({"competitors": [{"competitor": "Gong"}], "summary": "Crowded market"})]
    response = client.post(
        "/api/competitors", json={"companyName": "Acme", "industry": "saas", "competitors": ["Gong"]}
    )
    body = response.json()
    assert body["insights"]["summary"] == "Crowded market"
    assert "generatedAt" in body["insights"]
    assert isinstance(workspace.insights, CompetitorInsights)


def test_competitors_parse_failure(client, fake_llm):
    fake_llm.replies = ["nothing"]
    response = client.post("/api/competitors", json={"competitors": ["Gong"]})
    assert response.json()["error"] == "Failed to parse competitor analysis"


# -- onboarding pages ---------------------------------------------------------


def test_index_redirects_to_onboarding(offline_client):
    response = offline_client.get("/", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/onboarding/1"


def test_onboarding_page(offline_client):
    response = offline_client.get("/onboarding/1")
    assert response.status_code == 200
    assert "AI offline: template mode" in response.text
    assert "[Your Company Name]" in response.text


def test_unknown_step_is_404(offline_client):
    assert offline_client.get("/onboarding/9").status_code == 404


def test_step_errors_are_shown(offline_client):
    response = offline_client.post("/onboarding/1", data={"company_name": "", "industry": "saas"})
    assert response.status_code == 400
    assert "Company name is required" in response.text
    assert "Please provide a brief product description" in response.text


def test_onboarding_flow_falls_back_to_templates(offline_client):
    steps = {
        1: {"company_name": "Acme", "website": "", "industry": "saas", "product_description": "Reporting for RevOps"},
        2: {
            "target_audience": "RevOps leaders at startups",
            "job_titles": "VP Sales",
            "company_size": "11-50",
            "pain_points": "Manual reporting every week",
        },
        3: {"unique_value": "Reports in minutes", "key_benefits": "Saves ten hours", "competitors": "Gong"},
        4: {"current_channels": ["linkedin", "email"], "content_frequency": "weekly", "team_size": "solo"},
        5: {"primary_goal": "leads", "content_tone": "bold", "target_platforms": ["linkedin"], "content_language": "en"},
    }
    for step, data in steps.items():
        response = offline_client.post(f"/onboarding/{step}", data=data, follow_redirects=False)
        assert response.status_code == 303
    assert response.headers["location"] == "/dashboard"
    assert workspace.form.current_channels == ["linkedin", "email"]
    assert workspace.content.total() == 25
    assert "ANTHROPIC_API_KEY not configured" in workspace.warnings[0]

    page = offline_client.get("/dashboard")
    assert page.status_code == 200
    assert "Why I built Acme" in page.text
    assert "Post 1 piece on LinkedIn" in page.text


def test_complete_redirects_to_first_incomplete_step(offline_client):
    workspace.update_form({"company_name": "Acme"})
    response = offline_client.post("/onboarding/complete", follow_redirects=False)
    assert response.headers["location"] == "/onboarding/1"


def test_manual_autofill(offline_client):
    reply = "2. TARGET AUDIENCE:\nRevOps leaders at startups\n\n11. CONTENT TONE:\nBold"
    response = offline_client.post("/onboarding/autofill/manual", data={"reply": reply}, follow_redirects=False)
    assert response.headers["location"] == "/onboarding/2"
    assert workspace.form.target_audience == "RevOps leaders at startups"
    assert workspace.form.content_tone == "bold"


def test_ai_autofill(client, fake_llm):
    fake_llm.replies = [json.dumps({"productDescription": "Automated board reporting", "primaryGoal": "Leads"})]
    response = client.post("/onboarding/autofill", data={"company_name": "Acme"}, follow_redirects=False)
    assert response.status_code == 303
    assert workspace.form.company_name == "Acme"
    assert workspace.form.product_description == "Automated board reporting"
    assert workspace.form.primary_goal == "leads"


def test_ai_autofill_offline(offline_client):
    response = offline_client.post("/onboarding/autofill", data={"company_name": "Acme"})
    assert response.status_code == 502
    assert "Autofill failed" in response.text


# -- dashboard pages ----------------------------------------------------------


def test_dashboard_without_content_redirects(offline_client):
    response = offline_client.get("/dashboard", follow_redirects=False)
    assert response.headers["location"] == "/onboarding/1"


def test_dashboard_filters(offline_client):
    seed_workspace()
    workspace.edit_post("twitter", 2, title="Forecast thread")
    page = offline_client.get("/dashboard", params={"platform": "twitter", "search": "forecast"})
    assert page.status_code == 200
    assert "Forecast thread" in page.text
    assert "Post 3" not in page.text


def test_dashboard_post_actions(offline_client):
    seed_workspace()
    response = offline_client.post("/dashboard/posts/linkedin/1/toggle", follow_redirects=False)
    assert response.headers["location"] == "/dashboard?platform=linkedin"
    assert workspace.get_post("linkedin", 1).status == "review"

    offline_client.post("/dashboard/posts/linkedin/1/edit", data={"title": "Renamed"})
    assert workspace.get_post("linkedin", 1).title == "Renamed"

    offline_client.post("/dashboard/posts/delete", data={"keys": ["linkedin-1", "linkedin-2"], "platform": "linkedin"})
    assert len(workspace.content.linkedin) == 13


def test_dashboard_edit_rejects_short_content(offline_client):
    seed_workspace()
    response = offline_client.post("/dashboard/posts/linkedin/1/edit", data={"content": "too short"})
    assert response.status_code == 400
    assert "Content must be at least 50 characters" in response.json()["detail"]


def test_dashboard_copy_post_formats(offline_client):
    seed_workspace()
    text = "Launch notes\n\nWe shipped forecasting for every pipeline stage this week."
    workspace.edit_post("linkedin", 1, content=text)

    plain = offline_client.get("/dashboard/posts/linkedin/1/copy")
    assert plain.status_code == 200
    assert plain.headers["content-type"].startswith("text/plain")
    assert plain.text == text

    markdown = offline_client.get("/dashboard/posts/linkedin/1/copy", params={"fmt": "markdown"})
    assert markdown.text.startswith("**Launch notes**")

    html = offline_client.get("/dashboard/posts/linkedin/1/copy", params={"fmt": "html"})
    assert html.text == "<p>Launch notes</p>\n<p>We shipped forecasting for every pipeline stage this week.</p>"

    assert offline_client.get("/dashboard/posts/linkedin/1/copy", params={"fmt": "pdf"}).status_code == 400
    assert offline_client.get("/dashboard/posts/linkedin/99/copy").status_code == 404


def test_dashboard_lists_competitor_queries(offline_client):
    seed_workspace()
    page = offline_client.get("/dashboard")
    assert "Research queries for Gong" in page.text
    assert "site:gong.io" in page.text
    assert "Clari saas" in page.text
    assert 'href="/dashboard/posts/linkedin/1/copy?fmt=markdown"' in page.text


def test_dashboard_unknown_post_is_404(offline_client):
    seed_workspace()
    assert offline_client.post("/dashboard/posts/linkedin/99/toggle").status_code == 404


def test_dashboard_regenerate(client, fake_llm):
    seed_workspace()
    fake_llm.replies = [LONG_TEXT + " Now with a stronger hook."]
    response = client.post("/dashboard/posts/email/1/regenerate", data={"feedback": "stronger hook"})
    assert response.status_code == 200
    assert workspace.get_post("email", 1).content.endswith("stronger hook.")


def test_dashboard_regenerate_offline(offline_client):
    seed_workspace()
    response = offline_client.post("/dashboard/posts/email/1/regenerate")
    assert response.status_code == 502


def test_dashboard_task_toggle(offline_client):
    seed_workspace()
    offline_client.post("/dashboard/tasks/3/toggle")
    assert workspace.daily_tasks == {3: True}


def test_dashboard_competitors(client, fake_llm):
    seed_workspace()
    fake_llm.replies = [json.dumps({"competitors": [{"competitor": "Clari"}], "summary": "Two incumbents"})]
    response = client.post("/dashboard/competitors")
    assert response.status_code == 200
    assert workspace.insights.summary == "Two incumbents"
    assert "1. Clari\n2. Gong" in fake_llm.calls[0]["prompt"]


def test_dashboard_competitors_requires_names(client):
    seed_workspace()
    workspace.update_form({"competitors": ""})
    assert client.post("/dashboard/competitors").status_code == 400


def test_dashboard_calendar(client, fake_llm):
    seed_workspace()
    fake_llm.replies = [json.dumps([{"week": 1, "month": 1, "phase": "Foundation", "posts": [{"day": "Mon", "topic": "Launch recap"}]}])]
    page = client.post("/dashboard/calendar")
    assert page.status_code == 200
    assert "Launch recap" in page.text


# -- settings and export ------------------------------------------------------


def test_exports_require_content(offline_client):
    assert offline_client.get("/export/csv").status_code == 404
    assert offline_client.get("/export/json").status_code == 404


def test_csv_export(offline_client):
    seed_workspace()
    response = offline_client.get("/export/csv")
    assert response.status_code == 200
    assert 'filename="Acme Analytics-content-library-' in response.headers["content-disposition"]
    assert response.text.splitlines()[0] == '"Platform","ID","Title","Pillar","Status","Content"'
    assert len(response.text.splitlines()) == 35


def test_json_export(offline_client):
    seed_workspace()
    body = offline_client.get("/export/json").json()
    assert body["company"] == "Acme Analytics"
    assert body["summary"]["email"] == 4


def test_workspace_backup_round_trip(offline_client):
    seed_workspace()
    workspace.toggle_task(2)
    backup = offline_client.get("/export/workspace")
    assert 'filename="gtm-engine-backup-' in backup.headers["content-disposition"]

    offline_client.post("/settings/reset")
    assert workspace.content is None

    response = offline_client.post(
        "/settings/import",
        files={"file": ("backup.json", backup.content, "application/json")},
        follow_redirects=False,
    )
    assert response.headers["location"] == "/dashboard"
    assert workspace.content.total() == 34
    assert workspace.daily_tasks == {2: True}
    assert workspace.form.company_name == "Acme Analytics"


def test_import_rejects_bad_files(offline_client):
    response = offline_client.post("/settings/import", files={"file": ("x.json", b"{not json", "application/json")})
    assert response.status_code == 400
    assert "Failed to parse import file" in response.text

    response = offline_client.post("/settings/import", files={"file": ("x.json", b'{"formData": {}}', "application/json")})
    assert response.status_code == 400
    assert "Invalid import file" in response.text

    mistyped = {"formData": {"targetPlatforms": "linkedin"}, "generatedContent": make_library(), "readyState": True}
    response = offline_client.post(
        "/settings/import", files={"file": ("x.json", json.dumps(mistyped).encode(), "application/json")}
    )
    assert response.status_code == 400
    assert "Invalid import file" in response.text
    assert workspace.ready is False


def test_settings_page(offline_client):
    seed_workspace()
    page = offline_client.get("/settings")
    assert page.status_code == 200
    assert "34 posts" in page.text
