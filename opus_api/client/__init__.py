"""Public façade for the opus_api.client package.

HTTP client for the style API plus the helper layer UI and tooling code
builds on.
"""

from .api_client import DEFAULT_BASE_URL, OpusAPIClient, OpusAPIError
from .helpers import (
    class_display_name,
    delete_assignments,
    fetch_assignments,
    fetch_style_song_rows,
    safe_execute,
    upsert_assignments,
)

__all__ = [
    "DEFAULT_BASE_URL",
    "OpusAPIClient",
    "OpusAPIError",
    "class_display_name",
    "delete_assignments",
    "fetch_assignments",
    "fetch_style_song_rows",
    "safe_execute",
    "upsert_assignments",
]
