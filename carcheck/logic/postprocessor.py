"""
Postprocessor Module - Turn raw model output into a verdict

Handles:
1. Tolerant JSON extraction (raw, fenced, embedded object)
2. Recommendation label resolution (English or Hebrew, exact or substring)
3. Score coercion into an integer in [0, 100]
4. Plain-text report rendering for download
"""

import re
import json
import math
from typing import Any, Dict, Optional

from carcheck.domains.cars.messages import REPORT_LABELS, RECOMMENDATION_LABELS, normalize_language
from carcheck.domains.cars.schemas import EvaluationResult, Recommendation
from carcheck.logic.scorer import clamp_score

# Checked in order, negative phrases first
LABEL_PHRASES = [
    (Recommendation.NOT_RECOMMENDED, [
        "not recommended", "לא מומלץ", "bad deal",
        "not a good deal", "not good deal", "not a great deal", "no good deal",
        "עסקה לא טובה", "לא עסקה טובה", "אינה עסקה טובה",
    ]),
    (Recommendation.GOOD_DEAL, ["good deal", "עסקה טובה"]),
    (Recommendation.NEUTRAL, ["neutral", "depends", "תלוי בהעדפות", "ניטרלי"]),
]


def parse_json(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Try to extract and parse a JSON object from model output.

    Handles:
    - Plain JSON
    - JSON wrapped in a ``` code fence
    - JSON embedded in surrounding prose
    """
    if not text:
        return None
    text = text.strip()

    # Try direct parsing first
    try:
        parsed = json.loads(text)
        return parsed if isinstance(parsed, dict) else None
    except json.JSONDecodeError:
        pass

    # Try code fence
    fence_match = re.search(r'```(?:json)?\s*(\{.*?\})\s*```', text, re.DOTALL)
    if fence_match:
        try:
            return json.loads(fence_match.group(1))
        except json.JSONDecodeError:
            pass

    # Try extracting JSON object
    json_match = re.search(r'\{.*\}', text, re.DOTALL)
    if json_match:
        try:
            parsed = json.loads(json_match.group())
            return parsed if isinstance(parsed, dict) else None
        except json.JSONDecodeError:
            pass

    return None


def resolve_label(raw: Optional[str]) -> Optional[Recommendation]:
    """
    Map a model-supplied recommendation onto the closed label set.

    Exact display strings in any language win; otherwise the first known
    phrase found in the text decides. Returns None when nothing matches.
    """
    if not raw:
        return None
    cleaned = raw.strip()
    for table in RECOMMENDATION_LABELS.values():
        for canonical, display in table.items():
            if cleaned.lower() in (canonical.lower(), display.lower()):
                return Recommendation(canonical)

    lowered = cleaned.lower()
    for label, phrases in LABEL_PHRASES:
        if any(p in lowered for p in phrases):
            return label
    return None


def coerce_score(value: Any) -> Optional[int]:
    """Accept ints, floats and numeric strings ("82", "82/100", "82%"); None otherwise."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return clamp_score(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = re.search(r'-?\d+(?:\.\d+)?', value)
        if match:
            return clamp_score(float(match.group()))
    return None


def render_report(result: EvaluationResult, language: str = "en") -> str:
    """
    Render an evaluation as the plain-text report offered for download.
    """
    labels = REPORT_LABELS[normalize_language(language)]
    car = result.car_data.to_wire()

    lines = [
        labels["heading"],
        "=" * len(labels["heading"]),
        "",
        labels["car_details"] + ":",
        "-" * (len(labels["car_details"]) + 1),
    ]
    for key in ("title", "year", "mileage", "price", "ownership", "gearbox", "engineType"):
        value = car.get(key)
        lines.append(f"{labels[key]}: {'' if value is None else value}")

    lines += [
        "",
        labels["evaluation"] + ":",
        "-" * (len(labels["evaluation"]) + 1),
        result.evaluation,
        "",
        f"{labels['recommendation']}: {result.recommendation}",
        f"{labels['score']}: {result.score}%",
    ]
    return "\n".join(lines) + "\n"
