# ila_beauty/config/constants.py

# -----------------------------
# STORE COLLECTIONS
# -----------------------------

USERS = "users"
SESSIONS = "sessions"
PRODUCTS = "products"
CATEGORIES = "categories"
AUDIT_LOGS = "audit_logs"
RATE_LIMITS = "rate_limits"
NEWSLETTER_SUBSCRIBERS = "newsletter_subscribers"

# -----------------------------
# PASSWORDS
# -----------------------------

MIN_PASSWORD_LENGTH = 6
MAX_BCRYPT_BYTES = 72                 # bcrypt hard limit

# =========================================
# RESELLER PROGRAMME (BY STAGE)
# =========================================

DEFAULT_RESELLER_STAGE = "brown"

RESELLER_STAGE_DISCOUNTS = {
    "brown": 10,        # % off catalogue price
    "silver": 15,
    "gold": 20,
}

# -----------------------------
# RATE LIMITS
# -----------------------------

LOGIN_MAX_ATTEMPTS = 10
LOGIN_WINDOW_SECONDS = 300            # 10 attempts per 5 minutes per email
REGISTER_MAX_ATTEMPTS = 5
REGISTER_WINDOW_SECONDS = 3600

# -----------------------------
# CATALOGUE
# -----------------------------

UNCATEGORIZED = "Uncategorized"
FEATURED_PRODUCTS_LIMIT = 4

# Time windows
AUDIT_RETENTION_DAYS = 90
