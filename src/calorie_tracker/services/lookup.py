"""Food calorie estimates from a text-completion model."""

import asyncio
import json
import logging
import re
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from calorie_tracker.domain.errors import ResolutionError, ResolutionKind
from calorie_tracker.domain.foods import LibraryItem
from calorie_tracker.domain.lookup import FoodEstimate

_UNAUTHORIZED_STATUS = {401, 403}
_FENCE_PATTERN = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")

_logger = logging.getLogger(__name__)


class FoodEstimateClient(Protocol):
    """Interface for text-completion calls used to estimate foods."""

    async def complete(self, prompt: str) -> str:
        """Return the raw model text for a prompt."""


def build_prompt(description: str) -> str:
    """Return the estimate prompt for a free-text food description."""
    return (
        f'Estimate the calories for the food item: "{description}".\n'
        "Return ONLY a JSON object (no markdown formatting) with the structure:\n"
        '{"name": "standardized name", '
        '"unit": "standard serving unit (e.g. bowl, piece, 100g, ml)", '
        '"calories": number (estimated calories per unit)}'
    )


def strip_formatting(text: str) -> str:
    """Remove Markdown code fences and text around the JSON object."""
    cleaned = _FENCE_PATTERN.sub("", text.strip()).strip()
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end < start:
        return cleaned
    return cleaned[start : end + 1]


def parse_estimate(text: str) -> LibraryItem:
    """Parse raw model text into a library item."""
    try:
        payload = json.loads(strip_formatting(text))
        estimate = FoodEstimate.model_validate(payload)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ResolutionError(
            ResolutionKind.MALFORMED, f"Unreadable food estimate: {exc}"
        ) from exc
    return LibraryItem(
        name=estimate.name,
        calories_per_unit=estimate.calories,
        unit=estimate.unit,
    )


def classify_failure(exc: Exception) -> ResolutionError:
    """Map a collaborator exception onto a resolution error."""
    if isinstance(exc, ResolutionError):
        return exc
    if isinstance(exc, TimeoutError):
        return ResolutionError(ResolutionKind.TIMEOUT, "Food estimate timed out")
    status_code = _status_code_from_exception(exc)
    if status_code in _UNAUTHORIZED_STATUS:
        return ResolutionError(
            ResolutionKind.UNAUTHORIZED,
            f"Food estimate rejected credentials (status={status_code})",
        )
    return ResolutionError(
        ResolutionKind.UNAVAILABLE,
        f"Food estimate failed (status={status_code or 'n/a'}): {exc}",
    )


def _status_code_from_exception(exc: Exception) -> int | None:
    """Extract an HTTP status code from an exception, if available."""
    status_code = getattr(exc, "status_code", None)
    if isinstance(status_code, int):
        return status_code
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return status_code
    return None


@dataclass
class FoodLookupService:
    """Resolve free-text food descriptions into library items."""

    client: FoodEstimateClient
    timeout_seconds: float = 20.0

    async def resolve(self, description: str) -> LibraryItem:
        """Estimate a food's calories per unit."""
        query = description.strip()
        if not query:
            raise ResolutionError(ResolutionKind.MALFORMED, "Empty food description")
        try:
            text = await asyncio.wait_for(
                self.client.complete(build_prompt(query)),
                timeout=self.timeout_seconds,
            )
        except Exception as exc:
            error = classify_failure(exc)
            _logger.warning(
                "Food estimate failed: query=%s kind=%s error=%s",
                query,
                error.kind,
                exc,
            )
            raise error from exc
        if not text:
            raise ResolutionError(ResolutionKind.MALFORMED, "Empty food estimate")
        return parse_estimate(text)
