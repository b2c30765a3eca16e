# bmi_api/advice.py
import logging
from typing import Any, Callable, Dict, List, Optional

from . import llm_client
from .bmi import (
    NORMAL_RANGE,
    UNDERWEIGHT, NORMAL, OVERWEIGHT, OBESITY_I, OBESITY_II, OBESITY_III,
)
from .errors import AdviceUnavailable
from .schemas import AdviceIn, AdviceOut

logger = logging.getLogger(__name__)

BUCKETS = ["Underweight", "Normal", "Overweight", "Obese"]

CATEGORY_BUCKET = {
    UNDERWEIGHT: "Underweight",
    NORMAL: "Normal",
    OVERWEIGHT: "Overweight",
    OBESITY_I: "Obese",
    OBESITY_II: "Obese",
    OBESITY_III: "Obese",
}

Collaborator = Callable[[Dict[str, Any]], Dict[str, Any]]


def bucket_for(category: str) -> str:
    try:
        return CATEGORY_BUCKET[category]
    except KeyError:
        raise ValueError(f"Unknown category {category}") from None


def normalize_chart_data(raw_entries: Any, bmi: float, category: str) -> List[Dict[str, Any]]:
    """Rebuild the four chart buckets from whatever the collaborator sent.

    Only the user's bucket carries ``bmi``; only ``Normal`` carries ``range``.
    """
    user_bucket = bucket_for(category)
    by_name: Dict[str, Dict[str, Any]] = {}
    if isinstance(raw_entries, list):
        for item in raw_entries:
            if isinstance(item, dict) and item.get("name") in BUCKETS:
                by_name.setdefault(item["name"], item)

    chart = []
    repaired = []
    for name in BUCKETS:
        source = by_name.get(name, {})
        entry: Dict[str, Any] = {"name": name}
        if name == user_bucket:
            entry["bmi"] = float(bmi)
        if name == "Normal":
            entry["range"] = list(NORMAL_RANGE)
        if source.get("bmi") != entry.get("bmi") or _as_list(source.get("range")) != entry.get("range"):
            repaired.append(name)
        chart.append(entry)

    if repaired:
        logger.info(f"Chart data repaired for buckets {repaired} (user bucket: {user_bucket})")
    return chart


def _as_list(value: Any) -> Any:
    return list(value) if isinstance(value, (list, tuple)) else value


def normalize_advice(raw: Any, bmi: float, category: str) -> Dict[str, Any]:
    if not isinstance(raw, dict):
        raise AdviceUnavailable("Advice service returned an unexpected response")
    text = raw.get("personalizedAdvice")
    if not isinstance(text, str) or not text.strip():
        raise AdviceUnavailable("Advice service returned no advice text")
    return {
        "personalizedAdvice": text.strip(),
        "chartData": normalize_chart_data(raw.get("chartData"), bmi, category),
    }


def get_bmi_advice(request: AdviceIn, collaborator: Optional[Collaborator] = None) -> AdviceOut:
    """Ask the collaborator once for advice and return the normalized response."""
    call = collaborator or llm_client.generate_advice
    payload = request.model_dump()

    try:
        raw = call(payload)
    except AdviceUnavailable:
        raise
    except Exception as e:
        logger.error(f"Advice request failed: {e}", exc_info=True)
        raise AdviceUnavailable(str(e) or "Could not get BMI advice. Please try again later.") from e

    return AdviceOut.model_validate(normalize_advice(raw, request.bmi, request.category))
