# bmi_api/llm_client.py
import os
import json
import logging
from typing import Any, Dict

from openai import OpenAI

from . import config
from .bmi import healthy_weight_change
from .errors import AdviceUnavailable

logger = logging.getLogger(__name__)

PROMPTS_DIR = os.path.join(os.path.dirname(__file__), "prompts")

def _read(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()

def _client():
    if not config.OPENAI_API_KEY:
        return None
    # A failed call is reported upward immediately; no client-side retries.
    return OpenAI(api_key=config.OPENAI_API_KEY, timeout=config.LLM_TIMEOUT, max_retries=0)

def build_user_message(request: Dict[str, Any]) -> str:
    unit = request["unit"]
    weight_unit, height_unit = ("kg", "m") if unit == "metric" else ("lb", "in")
    lines = [
        f"BMI: {request['bmi']:.2f}",
        f"Category: {request['category']}",
        f"Unit system: {unit}",
        f"Weight: {request['weight']} {weight_unit}",
        f"Height: {request['height']} {height_unit}",
    ]
    change = healthy_weight_change(request["weight"], request["height"], unit, request["category"])
    if change is not None:
        lines.append(
            f"Weight change to reach BMI 18.5: {change['to_lower_normal']:+.1f} {weight_unit}; "
            f"to reach BMI 24.9: {change['to_upper_normal']:+.1f} {weight_unit}"
        )
    return "\n".join(lines)

def generate_advice(request: Dict[str, Any]) -> Dict[str, Any]:
    """One chat-completion call. Returns the model's JSON object as a dict."""
    client = _client()
    if client is None:
        raise AdviceUnavailable("LLM not configured. Set OPENAI_API_KEY to enable advice.")

    prompt = _read(os.path.join(PROMPTS_DIR, "advice.txt"))
    msg = [
        {"role": "system", "content": prompt},
        {"role": "user", "content": build_user_message(request)},
    ]
    logger.info(f"Requesting BMI advice from {config.LLM_MODEL} (category={request['category']})")
    resp = client.chat.completions.create(
        model=config.LLM_MODEL,
        messages=msg,
        temperature=config.LLM_TEMPERATURE,
        max_tokens=config.LLM_MAX_TOKENS,
        response_format={"type": "json_object"},
    )
    txt = resp.choices[0].message.content or ""
    try:
        return json.loads(txt)
    except json.JSONDecodeError as e:
        raise AdviceUnavailable(f"Advice service returned invalid JSON: {e}") from e
