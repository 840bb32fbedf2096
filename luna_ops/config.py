"""Configuration and settings."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"
OUTPUT_DIR = PROJECT_ROOT / "output"
OUTBOX_PATH = OUTPUT_DIR / "outbox.json"

# Ensure directories exist
DATA_DIR.mkdir(parents=True, exist_ok=True)
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

# Database
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'luna_ops.sqlite'}")
# Attempts before an optimistic-lock conflict is reported to the caller
TRANSACTION_MAX_ATTEMPTS = int(os.getenv("TRANSACTION_MAX_ATTEMPTS", "5"))

# Logging
LOG_DIR = OUTPUT_DIR / "logs"
LOG_FILE = Path(os.getenv("LOG_FILE", str(LOG_DIR / "app.jsonl")))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
VERBOSE_LOGGING = os.getenv("VERBOSE_LOGGING", "false").lower() == "true"

# Ensure log directory exists
LOG_FILE.parent.mkdir(parents=True, exist_ok=True)

# OpenTelemetry
TRACING_ENABLED = os.getenv("TRACING_ENABLED", "false").lower() == "true"
OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT", "http://localhost:4318/v1/traces")
SERVICE_NAME = os.getenv("SERVICE_NAME", "luna-ops")
DEPLOYMENT_ENVIRONMENT = os.getenv("DEPLOYMENT_ENVIRONMENT", "development")

# Paystack (payment gateway)
PAYSTACK_SECRET_KEY = os.getenv("PAYSTACK_SECRET_KEY", "")
PAYSTACK_BASE_URL = os.getenv("PAYSTACK_BASE_URL", "https://api.paystack.co").rstrip("/")
PAYSTACK_TIMEOUT_SECONDS = float(os.getenv("PAYSTACK_TIMEOUT_SECONDS", "30"))

# Field-sale push charge polling (10 x 6s ~= one minute)
PAYMENT_POLL_INTERVAL_SECONDS = float(os.getenv("PAYMENT_POLL_INTERVAL_SECONDS", "6"))
PAYMENT_POLL_MAX_ATTEMPTS = int(os.getenv("PAYMENT_POLL_MAX_ATTEMPTS", "10"))

# Transactional email
MAIL_PROVIDER = os.getenv("MAIL_PROVIDER", "zeptomail").lower()  # "zeptomail" | "outbox"
ZEPTO_TOKEN = os.getenv("ZEPTO_TOKEN", "")
ZEPTO_API_URL = os.getenv("ZEPTO_API_URL", "https://api.zeptomail.com/v1.1/email")
MAIL_FROM_ADDRESS = os.getenv("MAIL_FROM_ADDRESS", "noreply@luna.co.ke")
MAIL_FROM_NAME = os.getenv("MAIL_FROM_NAME", "Luna Essentials")
SALES_FROM_ADDRESS = os.getenv("SALES_FROM_ADDRESS", "sales@luna.co.ke")
SALES_FROM_NAME = os.getenv("SALES_FROM_NAME", "Luna Essentials Sales")

# Background notification workers
NOTIFIER_WORKER_COUNT = int(os.getenv("NOTIFIER_WORKER_COUNT", "2"))

# Public URLs (payment callback, referral short links)
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/")
FIELD_SALE_EMAIL_DOMAIN = os.getenv("FIELD_SALE_EMAIL_DOMAIN", "luna.co.ke")
REFERRAL_CODE_LENGTH = int(os.getenv("REFERRAL_CODE_LENGTH", "7"))
# Attendance work days follow local time (East Africa Time, UTC+3, no DST)
ATTENDANCE_UTC_OFFSET_HOURS = float(os.getenv("ATTENDANCE_UTC_OFFSET_HOURS", "3"))

# HTTP server
SERVER_PORT = int(os.getenv("SERVER_PORT", "8000"))
