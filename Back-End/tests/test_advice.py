# tests/test_advice.py
import pytest
from unittest.mock import MagicMock
from pydantic import ValidationError

from bmi_api.advice import (
    BUCKETS,
    CATEGORY_BUCKET,
    bucket_for,
    get_bmi_advice,
    normalize_advice,
    normalize_chart_data,
)
from bmi_api.errors import AdviceUnavailable
from bmi_api.schemas import AdviceIn, AdviceOut


def _with(chart, field):
    return [e for e in chart if field in e]


class TestBuckets:

    @pytest.mark.parametrize("category,bucket", [
        ("Underweight", "Underweight"),
        ("Normal weight", "Normal"),
        ("Overweight", "Overweight"),
        ("Obesity Class I", "Obese"),
        ("Obesity Class II", "Obese"),
        ("Obesity Class III", "Obese"),
    ])
    def test_mapping(self, category, bucket):
        assert bucket_for(category) == bucket

    def test_every_bucket_is_reachable(self):
        assert set(CATEGORY_BUCKET.values()) == set(BUCKETS)

    def test_unknown_category(self):
        with pytest.raises(ValueError):
            bucket_for("Obese")


class TestNormalizeChartData:
    """The four-bucket invariants hold whatever the collaborator sends"""

    def test_fills_missing_entries_in_fixed_order(self):
        chart = normalize_chart_data([], 22.0, "Normal weight")
        assert [e["name"] for e in chart] == BUCKETS

    def test_bmi_on_wrong_entry_is_moved(self, raw_advice):
        raw_advice["chartData"] = [
            {"name": "Underweight", "bmi": 31.0},
            {"name": "Normal", "bmi": 31.0},
            {"name": "Obese"},
        ]
        chart = normalize_chart_data(raw_advice["chartData"], 31.0, "Obesity Class I")
        assert _with(chart, "bmi") == [{"name": "Obese", "bmi": 31.0}]

    def test_range_only_on_normal(self):
        raw = [
            {"name": "Underweight", "range": [0, 18.5]},
            {"name": "Normal", "range": [18, 25]},
            {"name": "Overweight", "range": [25, 30]},
            {"name": "Obese"},
        ]
        chart = normalize_chart_data(raw, 27.0, "Overweight")
        ranged = _with(chart, "range")
        assert len(ranged) == 1
        assert ranged[0]["name"] == "Normal"
        assert ranged[0]["range"] == [18.5, 24.9]

    def test_user_bmi_overrides_collaborator_value(self):
        raw = [{"name": "Underweight", "bmi": 99.0}]
        chart = normalize_chart_data(raw, 17.2, "Underweight")
        assert chart[0] == {"name": "Underweight", "bmi": 17.2}

    @pytest.mark.parametrize("raw", [None, "chart", {"name": "Normal"}, [1, "x", None, {"name": "Fat"}]])
    def test_malformed_chart_data_is_rebuilt(self, raw):
        chart = normalize_chart_data(raw, 45.0, "Obesity Class III")
        assert [e["name"] for e in chart] == BUCKETS
        assert _with(chart, "bmi") == [{"name": "Obese", "bmi": 45.0}]
        assert _with(chart, "range") == [{"name": "Normal", "range": [18.5, 24.9]}]

    def test_unknown_keys_are_dropped(self):
        raw = [{"name": "Overweight", "color": "yellow", "bmi": 26.0}]
        chart = normalize_chart_data(raw, 26.0, "Overweight")
        assert chart[2] == {"name": "Overweight", "bmi": 26.0}

    def test_duplicate_entries_collapse_to_one(self):
        raw = [{"name": "Normal"}, {"name": "Normal", "bmi": 1.0}]
        chart = normalize_chart_data(raw, 22.0, "Normal weight")
        assert len(chart) == 4
        assert len([e for e in chart if e["name"] == "Normal"]) == 1


class TestNormalizeAdvice:

    def test_idempotent(self, raw_advice):
        once = normalize_advice(raw_advice, 22.857142857142858, "Normal weight")
        twice = normalize_advice(once, 22.857142857142858, "Normal weight")
        assert once == twice

    def test_exactly_one_bmi_and_one_range(self, raw_advice):
        out = normalize_advice(raw_advice, 33.0, "Obesity Class I")
        chart = out["chartData"]
        assert _with(chart, "bmi") == [{"name": "Obese", "bmi": 33.0}]
        assert _with(chart, "range") == [{"name": "Normal", "range": [18.5, 24.9]}]

    def test_advice_text_is_kept(self, raw_advice):
        out = normalize_advice(raw_advice, 22.0, "Normal weight")
        assert out["personalizedAdvice"] == raw_advice["personalizedAdvice"]

    @pytest.mark.parametrize("text", [None, "", "   ", 42])
    def test_missing_advice_text(self, raw_advice, text):
        raw_advice["personalizedAdvice"] = text
        with pytest.raises(AdviceUnavailable, match="no advice text"):
            normalize_advice(raw_advice, 22.0, "Normal weight")

    def test_non_dict_response(self):
        with pytest.raises(AdviceUnavailable):
            normalize_advice(["advice"], 22.0, "Normal weight")


class TestGetBmiAdvice:

    def test_calls_collaborator_once_with_request(self, advice_request, raw_advice):
        collaborator = MagicMock(return_value=raw_advice)
        out = get_bmi_advice(advice_request, collaborator=collaborator)

        collaborator.assert_called_once_with({
            "bmi": advice_request.bmi,
            "category": "Normal weight",
            "unit": "metric",
            "weight": 70.0,
            "height": 1.75,
        })
        assert isinstance(out, AdviceOut)
        assert out.personalized_advice == raw_advice["personalizedAdvice"]
        assert [e.name for e in out.chart_data] == BUCKETS
        normal = out.chart_data[1]
        assert normal.bmi == pytest.approx(22.857142857)
        assert normal.range == (18.5, 24.9)
        for entry in (out.chart_data[0], out.chart_data[2], out.chart_data[3]):
            assert entry.bmi is None and entry.range is None

    def test_wire_format_uses_camel_case(self, advice_request, raw_advice):
        out = get_bmi_advice(advice_request, collaborator=lambda _: raw_advice)
        dumped = out.model_dump(by_alias=True, exclude_none=True)
        assert set(dumped) == {"personalizedAdvice", "chartData"}
        assert dumped["chartData"][0] == {"name": "Underweight"}

    @pytest.mark.parametrize("exc", [TimeoutError("timed out"), ConnectionError("network down"), ValueError("bad json")])
    def test_collaborator_failure_is_wrapped(self, advice_request, exc):
        collaborator = MagicMock(side_effect=exc)
        with pytest.raises(AdviceUnavailable, match=str(exc)) as info:
            get_bmi_advice(advice_request, collaborator=collaborator)
        assert info.value.__cause__ is exc
        collaborator.assert_called_once()

    def test_advice_unavailable_passes_through(self, advice_request):
        original = AdviceUnavailable("LLM not configured")
        with pytest.raises(AdviceUnavailable) as info:
            get_bmi_advice(advice_request, collaborator=MagicMock(side_effect=original))
        assert info.value is original

    def test_empty_advice_is_unavailable(self, advice_request):
        with pytest.raises(AdviceUnavailable):
            get_bmi_advice(advice_request, collaborator=lambda _: {"chartData": []})

    def test_imperial_request(self, raw_advice):
        request = AdviceIn(bmi=31.5, category="Obesity Class I", unit="imperial", weight=213.0, height=69.0)
        out = get_bmi_advice(request, collaborator=lambda _: raw_advice)
        assert out.chart_data[3].bmi == 31.5
        assert out.chart_data[1].bmi is None


class TestAdviceRequest:
    """AdviceIn carries a finite BMI and the category it classifies to"""

    def test_category_must_match_bmi(self):
        with pytest.raises(ValidationError, match="does not match BMI"):
            AdviceIn(bmi=22.0, category="Obesity Class III", unit="metric", weight=70.0, height=1.75)

    @pytest.mark.parametrize("field", ["bmi", "weight", "height"])
    @pytest.mark.parametrize("value", [float("inf"), float("nan")])
    def test_rejects_non_finite(self, field, value):
        data = {"bmi": 41.2, "category": "Obesity Class III", "unit": "metric", "weight": 126.0, "height": 1.75}
        data[field] = value
        with pytest.raises(ValidationError):
            AdviceIn(**data)
