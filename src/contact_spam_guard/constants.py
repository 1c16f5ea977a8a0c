"""Constants for Contact Spam Guard."""

from pathlib import Path

# --- Config paths ---
CONFIG_DIR = Path.home() / ".contact-spam-guard"
CREDENTIALS_PATH = CONFIG_DIR / "credentials.json"
TOKEN_PATH = CONFIG_DIR / "token.json"
STORE_DB_PATH = CONFIG_DIR / "submissions.db"

# --- Google APIs ---
SCOPES = [
    "https://www.googleapis.com/auth/gmail.send",
    "https://www.googleapis.com/auth/spreadsheets",
]
SHEET_NAME = "Contact Submissions"
SHEET_HEADERS = ["Timestamp", "Name", "Email", "Subject", "Message", "Status"]
SUBMISSION_STATUS_NEW = "New"

# --- Turnstile ---
TURNSTILE_VERIFY_URL = "https://challenges.cloudflare.com/turnstile/v0/siteverify"
CAPTCHA_TIMEOUT_SECONDS = 5.0
CAPTCHA_FIELD = "cf-turnstile-response"

# --- Rate limiting ---
RATE_LIMIT_MAX_REQUESTS = 5  # submissions per address per window
RATE_LIMIT_WINDOW_SECONDS = 3600

# --- Field limits ---
MESSAGE_MIN_LENGTH = 10
MESSAGE_MAX_LENGTH = 5000
SUBJECT_MIN_LENGTH = 3
SUBJECT_MAX_LENGTH = 200
CAPS_RATIO_LIMIT = 0.5
CAPS_MIN_MESSAGE_LENGTH = 20  # shorter messages are exempt from the caps check

NAME_PATTERN = r"[a-zA-Z\s\-'.]{2,50}"
EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

# --- Suspicious email shapes (checked in order) ---
SUSPICIOUS_EMAIL_PATTERNS = [
    ("leading_digits", r"\d{5,}@"),
    ("disposable_domain", r"@(?:temp|fake|spam|test)"),
]
MAX_PLUS_SIGNS_IN_LOCAL_PART = 1

# --- Scoring thresholds ---
SPAM_THRESHOLD = 5
FOREIGN_SCRIPT_RATIO = 0.3
FOREIGN_SCRIPT_MIN_CHARS = 5  # absolute floor so short names never trip the penalty
FOREIGN_SCRIPT_PENALTY = 4

# --- Critical patterns (single match rejects, case-insensitive) ---
CRITICAL_PATTERNS = [
    {"label": "pharma", "pattern": r"\b(viagra|cialis|levitra)\b"},
    {"label": "gambling", "pattern": r"\b(casino|gambling|poker|lottery)\b"},
    {"label": "make_money_daily", "pattern": r"\bmake.*\$\d+.*day\b"},
    {"label": "guaranteed_income", "pattern": r"\bguaranteed.*income\b"},
    {"label": "no_risk_money", "pattern": r"\bno.*risk.*money\b"},
    {"label": "click_here_now", "pattern": r"\bclick.*here.*now\b"},
    {"label": "act_now_limited", "pattern": r"\bact.*now.*limited\b"},
    {"label": "free_trial_offer", "pattern": r"\bfree.*trial.*offer\b"},
    {"label": "weight_loss_pills", "pattern": r"\bweight.*loss.*pills\b"},
    {"label": "replica_watches", "pattern": r"\breplica.*watches\b"},
    {"label": "mlm", "pattern": r"\bmlm|multi.*level.*marketing\b"},
    {"label": "cheap_seo", "pattern": r"\bseo.*services.*cheap\b"},
]

# --- Scored patterns (weight x occurrences, case-sensitive unless ignore_case) ---
SCORED_PATTERNS = [
    {"label": "excessive_caps", "pattern": r"[A-Z]{5,}", "weight": 2},
    {"label": "excessive_exclamation", "pattern": r"!{3,}", "weight": 3},
    {"label": "money_mention", "pattern": r"\$\d+", "weight": 1},
    {"label": "url_links", "pattern": r"https?://\S+", "weight": 2},
    {"label": "long_numbers", "pattern": r"\b\d{10,}\b", "weight": 2},
    {"label": "repeated_chars", "pattern": r"(.)\1{4,}", "weight": 3},
    {
        "label": "promotional_words",
        "pattern": r"\b(free|cheap|discount|sale|offer)\b",
        "weight": 1,
        "ignore_case": True,
    },
]

# --- Non-Latin script ranges (inclusive code points) ---
FOREIGN_SCRIPT_RANGES = [
    ("cjk", 0x4E00, 0x9FFF),
    ("cyrillic", 0x0400, 0x04FF),
    ("hebrew", 0x0590, 0x05FF),
    ("arabic", 0x0600, 0x06FF),
]

# --- HTTP ---
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
LOG_PREVIEW_CHARS = 100

# --- Display ---
SUBMISSIONS_LIST_LIMIT = 20
