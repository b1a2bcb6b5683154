import os

# Load .env.test for local overrides before any settings are read
from dotenv import load_dotenv

env_test_path = os.path.join(os.path.dirname(__file__), ".env.test")
if os.path.exists(env_test_path):
    load_dotenv(env_test_path, override=True)

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SESSION_SECRET", "test-session-secret")
os.environ.setdefault("AUTO_CREATE_TABLES", "true")
# The limiter is built at import time; keep it off so repeated logins in
# tests are not throttled.
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.pop("SMS_GATEWAY_URL", None)

from libs.common.config import get_settings  # noqa: E402

# Clear cached settings to reload with new env vars
get_settings.cache_clear()
