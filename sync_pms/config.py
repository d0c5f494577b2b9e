import os

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG = LOG_LEVEL == "DEBUG"

DRY_RUN = os.getenv("DRY_RUN", "false").lower() == "true"

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise ValueError("DATABASE_URL must be set in the environment")

SCHEMA = "pms"

PMS_BASE_URL = os.getenv("PMS_BASE_URL")
if not PMS_BASE_URL:
    raise ValueError("PMS_BASE_URL must be set in the environment")

PMS_API_TOKEN = os.getenv("PMS_API_TOKEN")  # Optional bearer token

REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10"))
MIN_REQUEST_INTERVAL = float(os.getenv("MIN_REQUEST_INTERVAL", "0.5"))  # <= 2 req/sec

METRICS_PUSHGATEWAY_URL = os.getenv("METRICS_PUSHGATEWAY_URL")
