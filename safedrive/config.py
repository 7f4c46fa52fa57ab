import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Falls back to a local SQLite file so the service boots without Postgres
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./safedrive.db")

# Supabase Auth Configuration (access tokens are HS256 JWTs signed with the project secret)
SUPABASE_JWT_SECRET = os.getenv("SUPABASE_JWT_SECRET")
SUPABASE_JWT_AUDIENCE = os.getenv("SUPABASE_JWT_AUDIENCE", "authenticated")

# Booking pricing
SERVICE_FEE_RATE = float(os.getenv("SERVICE_FEE_RATE", "0.10"))  # 10% platform fee on subtotal
CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "₱")

# Pending requests the owner never answered are auto-cancelled after this many hours
PENDING_BOOKING_TTL_HOURS = int(os.getenv("PENDING_BOOKING_TTL_HOURS", "48"))

# Rental agreement wording
PLATFORM_NAME = os.getenv("PLATFORM_NAME", "SafeDrive")
GOVERNING_LAW = os.getenv("GOVERNING_LAW", "the Republic of the Philippines")

# Redis for the ARQ worker (REDIS_URL wins over the individual settings)
REDIS_URL = os.getenv("REDIS_URL")
REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", "6379"))
REDIS_PASSWORD = os.getenv("REDIS_PASSWORD")
REDIS_SSL = os.getenv("REDIS_SSL", "false").lower() == "true"
