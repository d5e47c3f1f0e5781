"""
HTTP client for the remote QAP scoring service.

One GET per request, no caching and no retries; retry policy belongs to
the SelectionController. Failures are split into TransportFailure (nothing
usable came back) and ServiceFailure (the service answered with an error or
with a body that does not decode into a ScoreResult).
"""

import logging
from typing import Optional

import requests

from .config import AppConfig
from .models import ScoreRequest, ScoreResult

logger = logging.getLogger(__name__)


class ScoringError(Exception):
    """Base class for failures surfaced to the SelectionController."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TransportFailure(ScoringError):
    """Raised when the request never reached the service or no response arrived."""

    pass


class ServiceFailure(ScoringError):
    """Raised when the service responded but signalled an error or sent a malformed body."""

    pass


class ScoreClient:
    def __init__(self, config: AppConfig, session: Optional[requests.Session] = None):
        self.config = config
        self._session = session or requests.Session()

    def fetch_score(self, request: ScoreRequest) -> ScoreResult:
        """
        Query the scoring service for one site.

        Args:
            request: Coordinate and application year to score.

        Returns:
            Fully decoded ScoreResult.

        Raises:
            TransportFailure: Connection error, timeout or other transport problem.
            ServiceFailure: Non-2xx status, non-JSON body or malformed payload.
        """
        params = request.to_params(self.config.score_api_key)
        logger.debug(
            "Requesting score for %.6f, %.6f (year %d)",
            request.coordinate.latitude,
            request.coordinate.longitude,
            request.application_year,
        )
        try:
            resp = self._session.get(
                self.config.score_url,
                params=params,
                timeout=self.config.http_timeout,
            )
        except requests.RequestException as e:
            logger.warning("Scoring service unreachable: %s", e)
            raise TransportFailure(f"Scoring service unreachable: {e}") from e

        if not resp.ok:
            detail = _error_detail(resp)
            logger.warning("Scoring service returned %d: %s", resp.status_code, detail)
            raise ServiceFailure(
                f"Scoring service returned {resp.status_code}: {detail}",
                status_code=resp.status_code,
            )

        try:
            payload = resp.json()
        except ValueError as e:
            logger.warning("Scoring service returned non-JSON body")
            raise ServiceFailure(
                "Scoring service returned non-JSON body", status_code=resp.status_code
            ) from e

        try:
            return ScoreResult.from_payload(payload)
        except ValueError as e:
            logger.warning("Scoring service returned malformed payload: %s", e)
            raise ServiceFailure(str(e), status_code=resp.status_code) from e


def _error_detail(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return (resp.text or "").strip()[:200] or "no detail"
    if isinstance(body, dict):
        for key in ("detail", "error", "message"):
            if body.get(key):
                return str(body[key])
    return str(body)[:200]
