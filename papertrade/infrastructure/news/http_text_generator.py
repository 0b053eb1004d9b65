"""
HTTP headline generator client.

Asks a remote text-generation endpoint for a single market headline. The
endpoint may answer with a JSON body ``{"story", "company", "weight"}`` or
with plain text in the three-line form::

    story: "Apple unveils a new chip"
    company: AAPL
    weight: +0.123
"""

import re
from typing import Any

import requests
from loguru import logger

from papertrade.core.constants import TEXT_GENERATOR_TIMEOUT_SECONDS
from papertrade.core.exceptions.simulation import ExternalServiceError
from papertrade.core.interfaces.collaborators import GeneratedHeadline, ITextGenerator

_LINE_PATTERN = re.compile(r"^\s*(story|company|weight)\s*:\s*(.+)$", re.IGNORECASE)
_WEIGHT_CHARS = re.compile(r"[^0-9+.\-]")


def parse_headline_text(text: str) -> GeneratedHeadline:
    """Parse the three-line story/company/weight format.

    Raises:
        ExternalServiceError: If a field is missing or the weight is not a number
    """
    fields: dict[str, str] = {}
    for line in text.splitlines():
        match = _LINE_PATTERN.match(line)
        if match:
            fields[match.group(1).lower()] = match.group(2).strip()

    missing = [name for name in ("story", "company", "weight") if not fields.get(name)]
    if missing:
        raise ExternalServiceError(f"Generator response missing fields: {', '.join(missing)}")

    return _build_headline(fields["story"].strip('"'), fields["company"], fields["weight"])


def parse_headline_payload(payload: Any) -> GeneratedHeadline:
    """Parse a JSON payload with story, company and weight keys.

    Raises:
        ExternalServiceError: If the payload is not a complete mapping
    """
    if not isinstance(payload, dict):
        raise ExternalServiceError(f"Generator returned non-object JSON: {type(payload).__name__}")
    try:
        return _build_headline(payload["story"], payload["company"], payload["weight"])
    except KeyError as e:
        raise ExternalServiceError(f"Generator response missing field: {e.args[0]}") from e


def _build_headline(story: Any, company: Any, weight: Any) -> GeneratedHeadline:
    if isinstance(weight, str):
        weight = _WEIGHT_CHARS.sub("", weight)
    try:
        impact = float(weight)
    except (TypeError, ValueError) as e:
        raise ExternalServiceError(f"Generator weight is not a number: {weight!r}") from e

    story = str(story).strip()
    if not story:
        raise ExternalServiceError("Generator returned an empty story")
    return GeneratedHeadline(headline=story, target_symbol=str(company).strip().upper(), impact=impact)


class HttpTextGenerator(ITextGenerator):
    """Text generator backed by an HTTP endpoint."""

    def __init__(
        self,
        endpoint: str,
        symbols: list[str] | None = None,
        timeout: float = TEXT_GENERATOR_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ):
        self.endpoint = endpoint
        self.symbols = symbols or []
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json, text/plain"})

    def generate(self) -> GeneratedHeadline:
        """POST to the endpoint and parse the headline it returns.

        Raises:
            ExternalServiceError: On transport errors, bad status or bad payload
        """
        try:
            response = self.session.post(
                self.endpoint, json={"symbols": self.symbols}, timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.warning(f"Headline request to {self.endpoint} failed: {e}")
            raise ExternalServiceError(f"Headline request failed: {e}") from e

        content_type = response.headers.get("Content-Type", "")
        if "json" in content_type:
            try:
                payload = response.json()
            except ValueError as e:
                raise ExternalServiceError(f"Generator returned invalid JSON: {e}") from e
            return parse_headline_payload(payload)

        return parse_headline_text(response.text)
