#!/usr/bin/env python3
"""One-off: list one page of a portal list view and print the params sent and the normalized result.
Usage: VIEW=users QUERY="role=teacher&full_name=ali&page=2" python scripts/debug_list_query.py
Course views also need COURSE_ID=42. Uses the tokens stored at AUTH_TOKENS_PATH."""
import asyncio
import json
import os

from eduportal.core.auth import resolve_auth_context
from eduportal.core.errors import AuthenticationError
from eduportal.core.logging_setup import configure_logging
from eduportal.services.http_client import close_http_client, init_http_client
from eduportal.services.list_controller import ListQueryController
from eduportal.services.list_views import get_view
from eduportal.services.query_params import parse_url_state
from eduportal.services.url_state import HistoryNavigator, URLStateSync

VIEW = os.environ.get("VIEW", "library")
QUERY = os.environ.get("QUERY", "")
COURSE_ID = os.environ.get("COURSE_ID", "")


async def main():
    configure_logging()
    config = get_view(VIEW)
    auth = None
    if config.requires_auth:
        try:
            auth = resolve_auth_context()
        except AuthenticationError as e:
            print(f"Login required for {VIEW!r}: {e.reason}")
            return
    path_params = {"course_id": COURSE_ID} if COURSE_ID else {}
    scope = {"course": COURSE_ID} if COURSE_ID else {}
    navigator = HistoryNavigator()
    init_http_client()
    try:
        controller = ListQueryController(
            config,
            auth=auth,
            scope=scope,
            initial_query=parse_url_state(config, QUERY),
            url_sync=URLStateSync(config, navigator, path_params),
        )
        await controller.refresh()

        print("=== GET {} ===".format(config.endpoint))
        print("Params:", json.dumps(controller.build_query_params(), default=str))
        print("Location:", navigator.current)
        print("State:", controller.state.value)
        if controller.error is not None:
            print("Error:", type(controller.error).__name__, controller.error.message)
        result = controller.result
        print("Total:", result.total_count, "pages:", result.total_pages)
        print("Next:", result.next_cursor, "Previous:", result.prev_cursor)
        print(json.dumps(result.items[:3], indent=2, default=str))
        await controller.close()
    finally:
        await close_http_client()


if __name__ == "__main__":
    asyncio.run(main())
