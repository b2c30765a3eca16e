# bmi_api/main.py
import logging
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .advice import CATEGORY_BUCKET, get_bmi_advice
from .bmi import CATEGORIES, NORMAL_RANGE
from .errors import AdviceUnavailable, InvalidMeasurement
from .schemas import (
    AdviceIn, AdviceOut, AssessmentOut, BmiOut, CategoriesOut, CategoryInfo, MeasurementIn,
)
from .service import calculate, run_assessment

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="BMI Insights API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # in production: restrict to the UI origin
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/health")
def health():
    return {"status": "ok"}

@app.get("/categories", response_model=CategoriesOut)
def categories():
    return {
        "categories": [CategoryInfo(category=c, bucket=CATEGORY_BUCKET[c]) for c in CATEGORIES],
        "normal_range": NORMAL_RANGE,
    }

@app.post("/bmi", response_model=BmiOut)
def bmi(payload: MeasurementIn):
    try:
        return calculate(payload)
    except InvalidMeasurement as e:
        logger.info(f"[/bmi] invalid measurement: {e}")
        raise HTTPException(status_code=422, detail=str(e))

@app.post("/advice", response_model=AdviceOut, response_model_exclude_none=True)
def advice(payload: AdviceIn):
    try:
        return get_bmi_advice(payload)
    except AdviceUnavailable as e:
        logger.warning(f"[/advice] advice unavailable: {e}")
        raise HTTPException(status_code=502, detail=str(e))

@app.post("/assess", response_model=AssessmentOut, response_model_exclude_none=True)
def assess(payload: MeasurementIn):
    try:
        result = run_assessment(payload)
    except InvalidMeasurement as e:
        logger.info(f"[/assess] invalid measurement: {e}")
        raise HTTPException(status_code=422, detail=str(e))
    except AdviceUnavailable as e:
        logger.warning(f"[/assess] advice unavailable: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    logger.info(f"[/assess] bmi={result.bmi:.2f} category={result.category}")
    return result
