from typing import Any, Dict, List, Optional, Sequence

import requests

from opus_api.core import ClassAssignment, ClassWeight, StoreError, log_step

from .gateway import Row, StyleStore

STYLES_TABLE = "sim_styles"
STYLE_SONGS_TABLE = "sim_style_songs"
ASSIGNMENTS_TABLE = "sim_style_song_classes"
WEIGHTS_TABLE = "sim_style_class_weights"

STYLE_TRACK_SELECT = (
    "library_song_id,sim_duration_seconds,"
    "library_songs(id,artist,title,album,peak_year,run_time_seconds,styles)"
)


def _quote_in_value(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def in_filter(values: Sequence[str]) -> str:
    """PostgREST `in` operator with every value double-quoted."""
    return "in.(" + ",".join(_quote_in_value(v) for v in values) + ")"


def content_range_total(header: Optional[str]) -> Optional[int]:
    """Total from a PostgREST Content-Range header ("0-999/1234"), or None when unknown."""
    if not header or "/" not in header:
        return None
    total = header.rsplit("/", 1)[1].strip()
    return int(total) if total.isdigit() else None


class PostgrestStyleStore(StyleStore):
    """
    StyleStore backed by a Supabase project's PostgREST endpoint.

    All calls go through one requests.Session carrying the service-role key.
    Non-2xx responses and transport errors are raised as StoreError with the
    PostgREST error message.
    """

    def __init__(
        self,
        base_url: str,
        service_role_key: str,
        *,
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
    ):
        self.rest_url = f"{base_url.rstrip('/')}/rest/v1"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "apikey": service_role_key,
                "Authorization": f"Bearer {service_role_key}",
                "Accept": "application/json",
                "Accept-Profile": "public",
                "Content-Profile": "public",
            }
        )

    def _send(
        self,
        method: str,
        table: str,
        *,
        params: Optional[Dict[str, str]] = None,
        json: Any = None,
        prefer: Optional[str] = None,
    ) -> requests.Response:
        url = f"{self.rest_url}/{table}"
        headers = {"Prefer": prefer} if prefer else None
        try:
            r = self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise StoreError(str(e)) from e

        if r.status_code >= 400:
            raise StoreError(self._error_message(r))
        return r

    def _request(
        self,
        method: str,
        table: str,
        *,
        params: Optional[Dict[str, str]] = None,
        json: Any = None,
        prefer: Optional[str] = None,
    ) -> Any:
        r = self._send(method, table, params=params, json=json, prefer=prefer)
        return self._decode(r)

    @staticmethod
    def _decode(r: requests.Response) -> Any:
        if not r.content:
            return None
        try:
            return r.json()
        except ValueError as e:
            raise StoreError(f"Invalid JSON from store: {e}") from e

    @staticmethod
    def _error_message(r: requests.Response) -> str:
        try:
            payload = r.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and payload.get("message"):
            return str(payload["message"])
        return r.text or f"HTTP {r.status_code}"

    def _select(
        self, table: str, params: Dict[str, str], limit: Optional[int] = None
    ) -> List[Row]:
        """
        Read every matching row, or the first `limit` of them.

        PostgREST's max-rows setting can cap a response below what was asked
        for. Pages are requested with `count=exact` and fetched by offset
        until the Content-Range total (or the limit) is reached.
        """
        rows: List[Row] = []
        while True:
            page_params = dict(params)
            if rows:
                page_params["offset"] = str(len(rows))
            if limit is not None:
                page_params["limit"] = str(limit - len(rows))

            r = self._send("GET", table, params=page_params, prefer="count=exact")
            page = self._decode(r)
            if page is None:
                page = []
            if not isinstance(page, list):
                raise StoreError(f"Unexpected response shape from {table}")
            rows.extend(page)

            total = content_range_total(r.headers.get("Content-Range"))
            if total is None or not page:
                return rows
            target = total if limit is None else min(total, limit)
            if len(rows) >= target:
                return rows
            log_step(f"Fetched {len(rows)} of {target} rows from {table}, paging")

    # ---------- Styles ----------

    def list_styles(self) -> List[Row]:
        log_step("Fetching styles")
        return self._select(STYLES_TABLE, {"select": "id,name", "order": "name"})

    # ---------- Membership ----------

    def list_style_tracks(self, style_id: str, limit: int) -> List[Row]:
        rows = self._select(
            STYLE_SONGS_TABLE,
            {
                "select": STYLE_TRACK_SELECT,
                "style_id": f"eq.{style_id}",
                "order": "library_song_id",
            },
            limit=limit,
        )
        result: List[Row] = []
        for r in rows:
            result.append(
                {
                    "library_song_id": r.get("library_song_id"),
                    "sim_duration_seconds": r.get("sim_duration_seconds"),
                    "song": r.get("library_songs") or None,
                }
            )
        return result

    def list_style_track_ids(self, style_id: str, limit: int) -> List[Row]:
        return self._select(
            STYLE_SONGS_TABLE,
            {
                "select": "library_song_id",
                "style_id": f"eq.{style_id}",
                "order": "library_song_id",
            },
            limit=limit,
        )

    # ---------- Assignments ----------

    def list_assignments(self, style_id: str) -> List[Row]:
        return self._select(
            ASSIGNMENTS_TABLE,
            {
                "select": "library_song_id,class_code,moved_at",
                "style_id": f"eq.{style_id}",
                "order": "library_song_id",
            },
        )

    def upsert_assignments(self, rows: Sequence[ClassAssignment]) -> None:
        payload = [
            {
                "style_id": r.style_id,
                "library_song_id": r.library_song_id,
                "class_code": r.class_code,
            }
            for r in rows
        ]
        log_step(f"Upserting {len(payload)} assignments")
        self._request(
            "POST",
            ASSIGNMENTS_TABLE,
            params={"on_conflict": "style_id,library_song_id"},
            json=payload,
            prefer="resolution=merge-duplicates,return=minimal",
        )

    def delete_assignments(self, style_id: str, song_ids: Sequence[str]) -> List[str]:
        data = self._request(
            "DELETE",
            ASSIGNMENTS_TABLE,
            params={
                "style_id": f"eq.{style_id}",
                "library_song_id": in_filter(song_ids),
                "select": "library_song_id",
            },
            prefer="return=representation",
        )
        return [r.get("library_song_id") for r in (data or []) if isinstance(r, dict)]

    # ---------- Weights ----------

    def list_weights(self, style_id: str) -> List[Row]:
        return self._select(
            WEIGHTS_TABLE,
            {
                "select": "class_code,weight_pct",
                "style_id": f"eq.{style_id}",
                "order": "class_code",
            },
        )

    def upsert_weights(self, rows: Sequence[ClassWeight]) -> None:
        payload = [
            {"style_id": r.style_id, "class_code": r.class_code, "weight_pct": r.weight_pct}
            for r in rows
        ]
        log_step(f"Upserting {len(payload)} class weights")
        self._request(
            "POST",
            WEIGHTS_TABLE,
            params={"on_conflict": "style_id,class_code"},
            json=payload,
            prefer="resolution=merge-duplicates,return=minimal",
        )
