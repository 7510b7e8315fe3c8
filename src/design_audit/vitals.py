"""Load Core Web Vitals from Lighthouse / PageSpeed reports."""

import json
from pathlib import Path
from typing import Optional, Union

from .inspector import VitalsSample
from .logger import logger

# VitalsSample field -> Lighthouse audit id (numericValue in ms, CLS unitless)
LIGHTHOUSE_AUDITS = {
    "lcp": "largest-contentful-paint",
    "cls": "cumulative-layout-shift",
    "fid": "max-potential-fid",
    "fcp": "first-contentful-paint",
}


def _number(value) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_vitals(data: dict) -> VitalsSample:
    """Build a VitalsSample from a Lighthouse/PageSpeed report or a flat dict.

    Accepts a PageSpeed Insights response (``lighthouseResult.audits``), a
    Lighthouse CLI report (``audits``) or ``{"lcp": 2100, "cls": 0.05, ...}``.
    """
    lh = data.get("lighthouseResult", data)
    audits = lh.get("audits")

    if isinstance(audits, dict):
        values = {}
        for field, audit_id in LIGHTHOUSE_AUDITS.items():
            audit = audits.get(audit_id) or {}
            values[field] = _number(audit.get("numericValue"))
        return VitalsSample(**values)

    return VitalsSample(**{field: _number(data.get(field)) for field in LIGHTHOUSE_AUDITS})


def load_vitals(path: Union[str, Path]) -> VitalsSample:
    """Read a vitals JSON file. Raises ValueError when it is not valid JSON."""
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"{path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a JSON object")

    sample = parse_vitals(data)
    logger.debug(f"Loaded vitals from {path}: {sample}")
    return sample
