import os
import logging
from dotenv import load_dotenv
from botocore.client import Config as BotoConfig
import boto3

# Load .env from project root
try:
    load_dotenv(dotenv_path=os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".env")))
except Exception:
    try:
        load_dotenv()
    except Exception:
        pass

# Asset bucket (Cloudflare R2, S3 API)
R2_ACCOUNT_ID = os.getenv("R2_ACCOUNT_ID", "")
R2_ACCESS_KEY_ID = os.getenv("R2_ACCESS_KEY_ID", "")
R2_SECRET_ACCESS_KEY = os.getenv("R2_SECRET_ACCESS_KEY", "")
R2_BUCKET = os.getenv("R2_BUCKET", "")
R2_PUBLIC_BASE_URL = (os.getenv("R2_PUBLIC_BASE_URL", "") or "").strip().strip('"').strip("'").rstrip("/")

# Remote relational store; empty means every collection runs on its local fallback
DATABASE_URL = os.getenv("DATABASE_URL", "").strip()

# Local fallback documents (one JSON file per collection)
LOCAL_STORE_DIR = os.path.abspath(os.getenv("LOCAL_STORE_DIR") or os.path.join(os.path.dirname(__file__), "..", "data", "local_store"))
# Skip the remote store entirely (demo / offline editing)
STORE_LOCAL_ONLY = os.getenv("STORE_LOCAL_ONLY", "").strip().lower() in ("1", "true", "yes")

ADMIN_EMAILS = [e.strip().lower() for e in (os.getenv("ADMIN_EMAILS", "").split(",") if os.getenv("ADMIN_EMAILS") else []) if e.strip()]

# Coins
WELCOME_BONUS_COINS = int(os.getenv("WELCOME_BONUS_COINS", "50"))

# Checkout
SHIPPING_FLAT_RATE = float(os.getenv("SHIPPING_FLAT_RATE", "0"))
TAX_RATE = float(os.getenv("TAX_RATE", "0"))
CURRENCY = os.getenv("CURRENCY", "USD").strip().upper()

# Uploads
MAX_IMAGE_SIZE_MB = int(os.getenv("MAX_IMAGE_SIZE_MB", "5"))
UPLOAD_RATE_LIMIT_PER_HOUR = int(os.getenv("UPLOAD_RATE_LIMIT_PER_HOUR", "100"))

# Logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(message)s")
logger = logging.getLogger("storefront")

# Static dir helper
STATIC_DIR = os.path.join(os.path.dirname(__file__), "..", "static")
STATIC_DIR = os.path.abspath(STATIC_DIR)

# S3/R2 resource for asset uploads
s3 = None

if R2_ACCOUNT_ID and R2_ACCESS_KEY_ID and R2_SECRET_ACCESS_KEY:
    s3 = boto3.resource(
        "s3",
        endpoint_url=f"https://{R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=R2_ACCESS_KEY_ID,
        aws_secret_access_key=R2_SECRET_ACCESS_KEY,
        config=BotoConfig(signature_version="s3v4"),
        region_name="auto",
    )

# CORS
ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",") if o.strip()]

# Rate limiter backend; empty means in-process memory
REDIS_URL = os.getenv("REDIS_URL", "").strip()
