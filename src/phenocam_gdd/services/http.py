"""
HTTP session shared by every datasource.

The PhenoCam archive, Daymet and the ORNL MODIS subset service throttle and
time out under load. Requests made through ``session`` are retried on 429
and 5xx responses with exponential backoff, and get a default timeout when
the caller passes none.

Usage::

    from phenocam_gdd.services.http import session

    resp = session.get(DAYMET_API, params={...})
    resp.raise_for_status()
"""

from __future__ import annotations

from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from phenocam_gdd import __version__

DEFAULT_RETRY = Retry(
    total=5,
    backoff_factor=2,  # 0s, 2s, 4s, 8s, 16s
    status_forcelist=[429, 500, 502, 503, 504],
    allowed_methods=["GET", "HEAD"],
    raise_on_status=False,
)

# Multi-year Daymet CSVs are generated on request
DEFAULT_TIMEOUT = 60  # seconds

USER_AGENT = f"phenocam-gdd/{__version__}"


class TimeoutAdapter(HTTPAdapter):
    """Retrying adapter that fills in a timeout for requests sent without one."""

    def __init__(self, timeout: float, **kwargs: Any) -> None:
        self.timeout = timeout
        super().__init__(**kwargs)

    def send(  # type: ignore[override]
        self, request: requests.PreparedRequest, timeout: Any = None, **kwargs: Any
    ) -> requests.Response:
        return super().send(
            request, timeout=self.timeout if timeout is None else timeout, **kwargs
        )


def create_session(
    retry: Retry | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> requests.Session:
    """
    Return a session with a ``TimeoutAdapter`` mounted for http and https.

    Args:
        retry: Retry policy; ``DEFAULT_RETRY`` when omitted.
        timeout: Seconds to wait when a request does not set its own timeout.
    """
    adapter = TimeoutAdapter(timeout, max_retries=retry or DEFAULT_RETRY)
    s = requests.Session()
    for prefix in ("https://", "http://"):
        s.mount(prefix, adapter)
    s.headers.update({"User-Agent": USER_AGENT})
    return s


#: Shared session for all datasource modules.
session: requests.Session = create_session()
