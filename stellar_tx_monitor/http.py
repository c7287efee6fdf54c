"""HTTP client helpers used to talk to Horizon."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, MutableMapping, Optional

import requests

from .errors import TxMonitorError

HttpRequestor = Callable[[str, Mapping[str, Any]], requests.Response]


def _problem_slug(problem_type: Any) -> Optional[str]:
    # Horizon problem types are URLs like https://stellar.org/horizon-errors/not_found
    if not isinstance(problem_type, str) or not problem_type:
        return None
    return problem_type.rstrip("/").rsplit("/", 1)[-1]


@dataclass
class HttpClient:
    """Small convenience wrapper around :mod:`requests` with monitor defaults."""

    requestor: Optional[HttpRequestor] = None
    user_agent: str = "python-stellar-tx-monitor/0.1"
    timeout_s: float = 30

    def __post_init__(self) -> None:
        if self.requestor is None:
            session = requests.Session()

            def _requestor(url: str, kwargs: Mapping[str, Any]) -> requests.Response:
                return session.request(url=url, **dict(kwargs))

            self.requestor = _requestor

    def send_get_request(
        self,
        base_url: str,
        endpoint: str,
    ) -> Any:
        url = f"{base_url.rstrip('/')}{endpoint}"
        headers: MutableMapping[str, str] = {
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }

        kwargs: MutableMapping[str, Any] = {
            "method": "GET",
            "headers": headers,
            "timeout": self.timeout_s,
        }

        assert self.requestor is not None
        response = self.requestor(url, kwargs)

        if not response.ok:
            problem_type: Optional[str] = None
            detail: Optional[str] = None
            try:
                payload = response.json()
            except ValueError:
                payload = response.text
            else:
                if isinstance(payload, Mapping):
                    problem_type = _problem_slug(payload.get("type"))
                    detail = payload.get("detail") or payload.get("title")
            raise TxMonitorError.from_http_response(
                url, response.status_code, payload, problem_type, detail
            )

        try:
            return response.json()
        except ValueError:
            return response.text
