"""
EduPlan Configuration

Central constants for storage, notifications and the AI channel.
Values can be overridden through environment variables (or a local .env).
"""

import os

from dotenv import load_dotenv

load_dotenv()

# Storage
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///eduplan.db")
STORAGE_KEY = os.getenv("EDUPLAN_STORAGE_KEY", "eduplan_data_v4")

# Anchor subject used for seeding and cross-subject gap analysis
ANCHOR_SUBJECT = "Tin học"

SUBJECTS = [
    "Tin học",
    "Toán",
    "Ngữ văn",
    "KHTN",
    "Lịch sử và Địa lí",
    "GDCD",
    "Công nghệ",
    "Nghệ thuật",
    "GDTC",
    "HĐTN, HN",
    "Khác",
]

# Notifications
NOTIFICATION_TIMEOUT_SECONDS = float(os.getenv("NOTIFICATION_TIMEOUT_SECONDS", "5"))

# AI retry policy (quota / rate-limit failures only)
AI_RETRY = {
    "max_retries": int(os.getenv("AI_MAX_RETRIES", "3")),
    "base_delay": float(os.getenv("AI_RETRY_BASE_DELAY", "2.0")),
    "multiplier": float(os.getenv("AI_RETRY_MULTIPLIER", "2.0")),
}

# Gap analysis
GAP_COVERAGE_THRESHOLD = int(os.getenv("GAP_COVERAGE_THRESHOLD", "1"))

# Export output directory
EXPORT_DIR = os.getenv("EDUPLAN_EXPORT_DIR", "exports")
