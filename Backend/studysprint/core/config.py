import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()  # Load from .env file

BASE_DIR = Path(__file__).resolve().parents[2]

# Storage
GOALS_DATA_FILE = os.getenv("GOALS_DATA_FILE", str(BASE_DIR / "data" / "goals.json"))

# Server
SERVICE_NAME = os.getenv("SERVICE_NAME", "studysprint-api")
PORT = int(os.getenv("PORT", "3001"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# CORS
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]
