# =============================================================================
# app/routers/deep_links.py - Deep Link Pages and App Association
# =============================================================================
# Shared links look like https://<host>/a/{content_type}/{id}.
#
# - With the iOS app installed, the association document below lets the app
#   claim /a/* and open the content directly.
# - Otherwise the page shows a Smart App Banner (apple-itunes-app meta tag),
#   an "Open in App" link using the custom URL scheme, and an App Store link.
#
# The ID is never looked up server-side; it is only echoed (escaped) into
# the page.
# =============================================================================

import html
from enum import Enum
from typing import Annotated

from fastapi import APIRouter, Path
from fastapi.responses import HTMLResponse, JSONResponse

from app.config import settings
from app.exceptions import ResourceNotFoundError

router = APIRouter()

ASSOCIATION_CACHE_CONTROL = "public, max-age=3600"


class DeepLinkContentType(str, Enum):
    """Content the app can open from a shared link."""
    ACTIVITIES = "activities"
    EVENTS = "events"
    WORKOUTS = "workouts"


PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <meta name="apple-itunes-app" content="app-id={app_store_id}">
  <title>Open in OMR Hub</title>
  <meta name="description" content="Open this {label} in the OMR Hub app">
</head>
<body>
  <main>
    <h1>Open in OMR Hub</h1>
    <p>This {label} is ready to view in the OMR Hub app</p>
    <p><code>{content_type}/{content_id}</code></p>
    <p><a href="{deep_link}">Open in App</a></p>
    <p>Don't have the app? <a href="{app_store_url}">Download OMR Hub on the App Store</a></p>
  </main>
</body>
</html>
"""


def render_deep_link_page(content_type: str, content_id: str) -> str:
    """
    Render the fallback page for a shared link.

    Raises:
        ResourceNotFoundError: If the app cannot open this content type
    """
    try:
        kind = DeepLinkContentType(content_type)
    except ValueError:
        raise ResourceNotFoundError("Page")

    safe_id = html.escape(content_id, quote=True)
    return PAGE_TEMPLATE.format(
        app_store_id=html.escape(settings.APP_STORE_ID, quote=True),
        label=kind.value[:-1],
        content_type=kind.value,
        content_id=safe_id,
        deep_link=html.escape(f"{settings.DEEP_LINK_SCHEME}://a/{kind.value}/", quote=True) + safe_id,
        app_store_url=html.escape(settings.APP_STORE_URL, quote=True),
    )


@router.get("/a/{content_type}/{content_id}", response_class=HTMLResponse)
async def deep_link_page(
    content_type: Annotated[str, Path(description="activities, events or workouts")],
    content_id: Annotated[str, Path(description="ID of the shared item")],
):
    """Fallback page for a shared link when the app does not intercept it."""
    return HTMLResponse(content=render_deep_link_page(content_type, content_id))


@router.get("/.well-known/apple-app-site-association")
async def apple_app_site_association():
    """Association document declaring the paths the iOS app claims."""
    body = {
        "applinks": {
            "apps": [],
            "details": [
                {
                    "appID": settings.APPLE_APP_ID,
                    "paths": ["/a/*"],
                },
            ],
        },
    }
    return JSONResponse(
        content=body,
        headers={"Cache-Control": ASSOCIATION_CACHE_CONTROL},
    )
