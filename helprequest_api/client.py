"""Help Request API client.

A thin wrapper around the HTTP surface of the service, built on the
``requests`` library.  Every method returns a tuple ``(data, error)``:
on success ``error`` is ``None``; on failure ``data`` is empty and
``error`` is a dictionary with ``status_code`` and ``message``.

Example::

    client = HelpRequestClient(base_url="http://localhost:8000")
    client.login("admin@example.com", "secret")
    created, error = client.create_help_request(
        requester_email="cgaucho@ucsb.edu",
        team_id="s22-5pm-3",
        table_or_breakout_room="7",
        request_time="2022-04-20T17:35:00",
        explanation="Need help with Swagger-ui",
        solved=False,
    )
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union

import requests


logger = logging.getLogger(__name__)

Error = Dict[str, Any]

HELPREQUESTS_PATH = "/api/helprequests"


def _help_request_params(
    requester_email: str,
    team_id: str,
    table_or_breakout_room: str,
    request_time: Union[str, datetime],
    explanation: str,
    solved: bool,
) -> Dict[str, Any]:
    if isinstance(request_time, datetime):
        request_time = request_time.isoformat()
    return {
        "requesterEmail": requester_email,
        "teamId": team_id,
        "tableOrBreakoutRoom": table_or_breakout_room,
        "requestTime": request_time,
        "explanation": explanation,
        "solved": "true" if solved else "false",
    }


class HelpRequestClient:
    """Client for the help request endpoints."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the client.

        Args:
            base_url: Base URL of the service, e.g. ``http://localhost:8000``.
            api_key: Optional bearer token sent as ``Authorization: Bearer <api_key>``.
                ``login`` sets it from the returned access token.
            session: Optional requests session; one is created if omitted.
            timeout: Per‑request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_body: Any | None = None,
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request and decode the JSON response."""
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("message") or err_json.get("detail") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------
    def login(self, email: str, password: str) -> Tuple[Optional[str], Optional[Error]]:
        """Log in and remember the returned token for later calls."""
        data, error = self._request("POST", "/api/users/login", json_body={"email": email, "password": password})
        if error:
            return None, error
        self.api_key = data["access_token"]
        return self.api_key, None

    # ------------------------------------------------------------------
    # Help requests
    # ------------------------------------------------------------------
    def list_help_requests(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        data, error = self._request("GET", f"{HELPREQUESTS_PATH}/all")
        if error:
            return [], error
        return data or [], None

    def get_help_request(self, help_request_id: int) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", HELPREQUESTS_PATH, params={"id": help_request_id})

    def create_help_request(
        self,
        *,
        requester_email: str,
        team_id: str,
        table_or_breakout_room: str,
        request_time: Union[str, datetime],
        explanation: str,
        solved: bool = False,
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Create a help request; the fields travel as query parameters."""
        params = _help_request_params(
            requester_email, team_id, table_or_breakout_room, request_time, explanation, solved
        )
        return self._request("POST", f"{HELPREQUESTS_PATH}/post", params=params)

    def update_help_request(
        self,
        help_request_id: int,
        *,
        requester_email: str,
        team_id: str,
        table_or_breakout_room: str,
        request_time: Union[str, datetime],
        explanation: str,
        solved: bool,
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Replace every field of the help request ``help_request_id``."""
        body = _help_request_params(
            requester_email, team_id, table_or_breakout_room, request_time, explanation, solved
        )
        body["solved"] = solved
        return self._request("PUT", HELPREQUESTS_PATH, params={"id": help_request_id}, json_body=body)

    def delete_help_request(self, help_request_id: int) -> Tuple[Optional[str], Optional[Error]]:
        """Delete a help request and return the server's confirmation message."""
        data, error = self._request("DELETE", HELPREQUESTS_PATH, params={"id": help_request_id})
        if error:
            return None, error
        return data.get("message") if data else None, None
