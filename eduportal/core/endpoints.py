"""REST endpoint table (relative to settings.api_root) and URL helpers."""

from eduportal.config import settings

ENDPOINTS: dict[str, dict[str, str]] = {
    "auth": {
        "login": "auth/token/",
        "refresh": "auth/token/refresh/",
        "user": "auth/user/",
        "set_password": "auth/user/{id}/set_password/",
    },
    "course": {
        "list": "course/",
        "by_id": "course/{id}/",
        "live_session": "course/live_session/",
        "attendance": "course/attendance/",
        "recording": "course/recording/",
        "certificate": "course/certificate/",
    },
    "subject": {
        "list": "subject/",
        "by_id": "subject/{id}/",
    },
    "enrollment": {
        "list": "enrollment/",
        "by_id": "enrollment/{id}/",
    },
    "user": {
        "list": "auth/user/",
        "by_id": "auth/user/{id}/",
        "registration": "auth/registration/",
    },
    "library": {
        "categories": "library/category/",
        "resources": "library/resource/",
        "resource_by_id": "library/resource/{id}/",
        "ratings": "library/rating/",
        "bookmarks": "library/bookmark/",
    },
    "communications": {
        "list": "communications/",
        "by_id": "communications/{id}/",
        "stats": "communications/stats/",
    },
    "report": {
        "list": "report/",
        "by_id": "report/{id}/",
    },
    "notification": {
        "list": "notification/",
        "unread_count": "notification/unread-count/",
    },
}


def build_endpoint(template: str, **params) -> str:
    """Replace {name} placeholders in an endpoint template."""
    url = template
    for key, value in params.items():
        url = url.replace("{" + key + "}", str(value))
    return url


def api_url(template: str, **params) -> str:
    return f"{settings.api_root}{build_endpoint(template, **params)}"


def media_url(path: str | None) -> str:
    """Media files live under the site root (/media/...), not under /api/."""
    if not path:
        return ""
    if path.startswith("http://") or path.startswith("https://"):
        return path
    normalized = path if path.startswith("/") else f"/{path}"
    return f"{settings.media_base_url}{normalized}"
