from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

DEFAULT_BASE_URL = "http://localhost:8787"


class OpusAPIError(Exception):
    """Error response from the API, carrying the uniform {message, status}."""

    def __init__(self, message: str, status: int):
        super().__init__(message)
        self.message = message
        self.status = status


class OpusAPIClient:
    """
    Client for the Opus style API.

    Every method maps to one route. List routes return the unwrapped `data`
    payload; write routes return the raw {ok, upserted|deleted} body.

    `session` can be any object with a requests-compatible
    `request(method, url, **kwargs)`; it defaults to a requests.Session.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_key: str = "",
        *,
        session: Any = None,
        timeout: float = 30,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    def request(
        self,
        method: str,
        endpoint: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Authenticated request returning the JSON object body. Raises
        OpusAPIError on any error status, or when a success body is not a
        JSON object.
        """
        url = f"{self.base_url}{endpoint}"
        headers = {"Content-Type": "application/json", "X-API-Key": self.api_key}

        r = self.session.request(
            method,
            url,
            headers=headers,
            json=json,
            params=params,
            timeout=self.timeout,
        )

        try:
            data = r.json()
        except ValueError:
            data = None

        if r.status_code >= 400:
            error = data.get("error") if isinstance(data, dict) else None
            error = error if isinstance(error, dict) else {}
            raise OpusAPIError(
                error.get("message") or "API request failed",
                error.get("status") or r.status_code,
            )
        if not isinstance(data, dict):
            raise OpusAPIError("Invalid response", r.status_code)
        return data

    @staticmethod
    def _style_path(style_id: str, suffix: str) -> str:
        return f"/styles/{quote(str(style_id), safe='')}/{suffix}"

    # ---------- Health ----------

    def health(self) -> Dict[str, Any]:
        return self.request("GET", "/health")

    # ---------- Styles ----------

    def get_styles(self) -> List[Dict[str, Any]]:
        return self.request("GET", "/styles")["data"]

    # ---------- Tracks ----------

    def get_style_tracks(self, style_id: str) -> List[Dict[str, Any]]:
        return self.request("GET", self._style_path(style_id, "tracks"))["data"]

    # ---------- Assignments ----------

    def get_style_assignments(self, style_id: str) -> List[Dict[str, Any]]:
        return self.request("GET", self._style_path(style_id, "assignments"))["data"]

    def update_style_assignments(
        self, style_id: str, assignments: List[Dict[str, str]]
    ) -> Dict[str, Any]:
        """assignments: [{library_song_id, class_code}]"""
        return self.request(
            "PUT",
            self._style_path(style_id, "assignments"),
            json={"assignments": assignments},
        )

    def delete_style_assignments(self, style_id: str, song_ids: List[str]) -> Dict[str, Any]:
        return self.request(
            "DELETE",
            self._style_path(style_id, "assignments"),
            json={"songIds": song_ids},
        )

    # ---------- Weights ----------

    def get_style_weights(self, style_id: str) -> List[Dict[str, Any]]:
        return self.request("GET", self._style_path(style_id, "weights"))["data"]

    def update_style_weights(
        self, style_id: str, weights: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        """weights: [{class_code, weight_pct}], summing to 100"""
        return self.request(
            "PUT",
            self._style_path(style_id, "weights"),
            json={"weights": weights},
        )

    # ---------- Playback profile ----------

    def get_playback_profile(
        self, style_id: str, include_track_ids: bool = False
    ) -> Dict[str, Any]:
        params = {"include_track_ids": "true"} if include_track_ids else None
        return self.request(
            "GET", self._style_path(style_id, "playback-profile"), params=params
        )["data"]
