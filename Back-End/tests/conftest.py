# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from bmi_api.main import app
from bmi_api.schemas import AdviceIn


@pytest.fixture
def raw_advice():
    """A plausible collaborator reply with the user's BMI on the wrong bucket."""
    return {
        "personalizedAdvice": (
            "Your BMI is in a healthy range. Keep enjoying regular activity and balanced meals. "
            "This is not medical advice."
        ),
        "chartData": [
            {"name": "Underweight", "bmi": 22.86},
            {"name": "Normal"},
            {"name": "Overweight", "range": [25, 29.9]},
            {"name": "Obese"},
        ],
    }


@pytest.fixture
def advice_request():
    return AdviceIn(bmi=70 / 1.75 ** 2, category="Normal weight", unit="metric", weight=70.0, height=1.75)


@pytest.fixture
def client():
    return TestClient(app)
