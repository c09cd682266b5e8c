"""List views of the portal and how each one talks to its endpoint."""

from eduportal.core.endpoints import ENDPOINTS
from eduportal.schemas.list_query import FilterSpec, ListViewConfig
from eduportal.schemas.pagination import PaginationStyle

LANGUAGES = {
    "arabic": "Arabic",
    "english": "English",
    "urdu": "Urdu",
    "farsi": "Farsi",
    "pashto": "Pashto",
    "turkish": "Turkish",
}

ATTENDANCE = ListViewConfig(
    name="attendance",
    endpoint=ENDPOINTS["course"]["attendance"],
    path="/courses/{course_id}/attendance",
    pagination=PaginationStyle.OFFSET,
    page_size_options=[10, 20, 50],
    search_params=["title"],
    default_ordering="-created_at",
    filters=[
        FilterSpec(key="status", label="Status", choices={"present": "Present", "absent": "Absent"}),
        FilterSpec(key="date_from", label="From", sentinel=None),
        FilterSpec(key="date_to", label="To", sentinel=None),
    ],
    user_scope_param="student",
)

RECORDINGS = ListViewConfig(
    name="recordings",
    endpoint=ENDPOINTS["course"]["recording"],
    path="/courses/{course_id}/recordings",
    pagination=PaginationStyle.OFFSET,
    page_size_options=[10, 20, 50],
    search_params=["title"],
    default_ordering="-created_at",
    filters=[
        FilterSpec(key="date_from", label="From", sentinel=None),
        FilterSpec(key="date_to", label="To", sentinel=None),
    ],
)

COMMUNICATIONS = ListViewConfig(
    name="communications",
    endpoint=ENDPOINTS["communications"]["list"],
    path="/dashboard/super-admin/communications",
    filters=[
        FilterSpec(
            key="communication_type",
            label="Type",
            choices={
                "custom_request": "Course Requests",
                "contact_message": "Messages",
                "report": "Reports",
            },
        ),
        FilterSpec(
            key="status",
            label="Status",
            choices={
                s: s.capitalize()
                for s in (
                    "pending", "new", "read", "reviewed", "contacted", "replied",
                    "approved", "rejected", "completed", "closed", "resolved",
                )
            },
        ),
    ],
)

ENROLLMENTS = ListViewConfig(
    name="enrollments",
    endpoint=ENDPOINTS["enrollment"]["list"],
    path="/dashboard/super-admin/enrollments",
    filters=[
        FilterSpec(
            key="status",
            param="status__iexact",
            label="Status",
            choices={"pending": "Pending", "cancelled": "Cancelled", "completed": "Completed", "expired": "Expired"},
        ),
    ],
)

ADMIN_LIBRARY = ListViewConfig(
    name="admin_library",
    endpoint=ENDPOINTS["library"]["resources"],
    path="/dashboard/super-admin/library",
    filters=[FilterSpec(key="language", label="Language", choices=LANGUAGES)],
)

USERS = ListViewConfig(
    name="users",
    endpoint=ENDPOINTS["user"]["list"],
    path="/dashboard/super-admin/users",
    search_params=["full_name", "email"],
    filters=[
        FilterSpec(
            key="role",
            choices={
                "student": "Student",
                "teacher": "Teacher",
                "parent": "Parent",
                "staff": "Staff",
                "super_admin": "Super Admin",
            },
        ),
        FilterSpec(
            key="status",
            param="is_active",
            choices={"active": "Active", "inactive": "Inactive"},
            value_map={"active": True, "inactive": False},
        ),
    ],
)

PUBLIC_LIBRARY = ListViewConfig(
    name="library",
    endpoint=ENDPOINTS["library"]["resources"],
    path="/library",
    page_size_options=[12, 24, 48],
    default_page_size=12,
    default_ordering="-created_at",
    sort_aliases={
        "newest": "-created_at",
        "oldest": "created_at",
        "highest-rated": "-average_rating",
        "most-viewed": "-view_count",
        "most-downloaded": "-download_count",
        "title-asc": "title",
        "title-desc": "-title",
    },
    filters=[
        FilterSpec(key="category", label="Category"),
        FilterSpec(key="subject", label="Subject", sentinel=None),
        FilterSpec(key="language", label="Language", sentinel=None, choices=LANGUAGES, multiple=True),
        FilterSpec(key="min_rating", label="Rating", sentinel=0),
    ],
    requires_auth=False,
)

VIEWS: dict[str, ListViewConfig] = {
    view.name: view
    for view in (ATTENDANCE, RECORDINGS, COMMUNICATIONS, ENROLLMENTS, ADMIN_LIBRARY, USERS, PUBLIC_LIBRARY)
}


def get_view(name: str) -> ListViewConfig:
    try:
        return VIEWS[name]
    except KeyError:
        raise KeyError(f"Unknown list view {name!r}; known: {', '.join(sorted(VIEWS))}") from None
