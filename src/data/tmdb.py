"""TMDB API client for movie metadata enrichment."""

from __future__ import annotations

import time
from typing import Any, Callable, Mapping
from urllib.parse import urljoin

import requests

from src.config import EnrichSettings
from src.data.rate_limit import RateLimiter


class TmdbError(RuntimeError):
    """Base class for every failure talking to TMDB."""


class TransportError(TmdbError):
    """DNS, connection or timeout failure. Not retried."""


class RateLimitedError(TmdbError):
    def __init__(self, endpoint: str, attempts: int) -> None:
        super().__init__(f"TMDB kept answering 429 for {endpoint} after {attempts} attempts")
        self.endpoint = endpoint
        self.attempts = attempts


class ExternalAPIError(TmdbError):
    """Structured TMDB error body (``status_code`` / ``status_message``)."""

    def __init__(self, code: int, message: str, *, http_status: int | None = None) -> None:
        super().__init__(f"API error: {message} (Code: {code})")
        self.code = code
        self.message = message
        self.http_status = http_status


class UnexpectedStatusError(TmdbError):
    def __init__(self, status_code: int, reason: str = "") -> None:
        super().__init__(f"unexpected status: {status_code} {reason}".rstrip())
        self.status_code = status_code


class NotFoundError(TmdbError):
    def __init__(self, title: str, year: int) -> None:
        super().__init__(f"no results found for {title} ({year})")
        self.title = title
        self.year = year


def _retry_after_seconds(resp: requests.Response) -> int | None:
    raw = (resp.headers.get("Retry-After") or "").strip()
    return int(raw) if raw.isdigit() else None


class TmdbClient:
    """Rate-limited access to the two TMDB calls the fetcher needs.

    One client (and its session and limiter) is shared by all workers of a run.
    """

    def __init__(
        self,
        settings: EnrichSettings,
        session: requests.Session | None = None,
        limiter: RateLimiter | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.settings = settings
        self.session = session or requests.Session()
        self.limiter = limiter or RateLimiter(settings.rate_limit_per_second)
        self._sleep = sleep

    def request(self, endpoint: str, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """GET ``endpoint`` and return the decoded JSON object.

        A 429 is retried after ``Retry-After`` seconds (or 1s per attempt so
        far when the header is missing), up to ``max_rate_limit_retries`` times.
        """
        url = urljoin(self.settings.base_url, endpoint)
        query = {"api_key": self.settings.api_key}
        if params:
            query.update(params)
        max_retries = self.settings.max_rate_limit_retries

        attempt = 0
        while True:
            self.limiter.acquire()
            try:
                resp = self.session.get(
                    url,
                    params=query,
                    headers={"Accept": "application/json"},
                    timeout=self.settings.request_timeout,
                )
            except requests.RequestException as exc:
                # requests echoes the full URL, api_key included
                message = str(exc).replace(self.settings.api_key, "***")
                raise TransportError(f"request failed: {message}") from exc

            if resp.status_code != 429:
                break
            if attempt >= max_retries:
                raise RateLimitedError(endpoint, attempt + 1)

            attempt += 1
            retry_after = _retry_after_seconds(resp)
            delay = retry_after if retry_after is not None else 1.0 * attempt
            print(f"  TMDB: rate limit exceeded. Waiting {delay}s before retry {attempt}/{max_retries}...")
            self._sleep(delay)

        if not 200 <= resp.status_code < 300:
            raise self._status_error(resp)

        try:
            payload = resp.json()
        except ValueError as exc:
            raise TmdbError(f"TMDB returned non-JSON response for {endpoint}") from exc
        if not isinstance(payload, dict):
            raise TmdbError(f"TMDB returned unexpected JSON shape for {endpoint}")
        return payload

    @staticmethod
    def _status_error(resp: requests.Response) -> TmdbError:
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("status_message"):
            code = body.get("status_code")
            return ExternalAPIError(
                code if isinstance(code, int) else resp.status_code,
                str(body["status_message"]),
                http_status=resp.status_code,
            )
        return UnexpectedStatusError(resp.status_code, resp.reason or "")

    def search_movie(self, title: str, year: int) -> int:
        """Search TMDB for a movie by title and year.

        Returns the id of the first result, trusting TMDB's relevance order.
        Without a match for the year, searches once more without it.
        """
        params = {
            "query": title,
            "language": self.settings.language,
            "include_adult": "false",
        }
        if year:
            params["year"] = str(year)

        results = self._search_results(params)

        if not results and "year" in params:
            # Retry without year filter
            del params["year"]
            results = self._search_results(params)

        if not results:
            raise NotFoundError(title, year)
        best = results[0]
        if not isinstance(best, dict) or not isinstance(best.get("id"), int):
            raise TmdbError(f"TMDB search result without an id for {title} ({year})")
        return best["id"]

    def _search_results(self, params: dict[str, str]) -> list:
        results = self.request("search/movie", params).get("results")
        if results is None:
            return []
        if not isinstance(results, list):
            raise TmdbError(f"TMDB search returned malformed results for {params['query']!r}")
        return results

    def get_movie_details(self, tmdb_id: int) -> dict[str, Any]:
        """Fetch full movie details from TMDB."""
        return self.request(f"movie/{int(tmdb_id)}", {"language": self.settings.language})
