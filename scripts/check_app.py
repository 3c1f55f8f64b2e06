import os
import pathlib
import sys


def ensure_settings() -> None:
    """Pin a model name and clear any key so the check never reaches the network."""
    os.environ.setdefault("GTM_ANTHROPIC_MODEL", "claude-sonnet-4-20250514")
    os.environ.pop("ANTHROPIC_API_KEY", None)
    os.environ.pop("GTM_ANTHROPIC_API_KEY", None)


def ensure_project_path() -> None:
    """Make sure the project root is on sys.path for local module imports."""
    project_root = pathlib.Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(project_root))


if __name__ == "__main__":
    ensure_settings()
    ensure_project_path()

    from gtm_engine.main import app  # noqa: E402

    api_routes = [route for route in app.routes if getattr(route, "path", "").startswith("/api/")]
    print("FastAPI app imported successfully with", len(app.routes), "routes,", len(api_routes), "under /api.")
