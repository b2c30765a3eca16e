# bmi_api/config.py
import os

from dotenv import load_dotenv

load_dotenv()

# LLM (OpenAI)
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
LLM_MODEL = os.getenv("LLM_MODEL", "gpt-4o-mini")
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.4"))
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "600"))
LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "60"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
