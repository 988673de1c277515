import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./studio.db")

# Firebase Configuration
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")

# Cloudflare R2 Configuration (photo storage)
R2_ACCOUNT_ID = os.getenv("R2_ACCOUNT_ID")
R2_ACCESS_KEY_ID = os.getenv("R2_ACCESS_KEY_ID")
R2_SECRET_ACCESS_KEY = os.getenv("R2_SECRET_ACCESS_KEY")
R2_BUCKET_NAME = os.getenv("R2_BUCKET_NAME", "studio-photos")
# Public bucket domain used to build photo URLs, e.g. https://photos.example.com
R2_PUBLIC_BASE_URL = os.getenv("R2_PUBLIC_BASE_URL", "")

# Frontend / CORS
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS", f"{FRONTEND_URL},http://localhost:3000"
).split(",")
SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"

# Photo uploads
MAX_UPLOAD_SIZE = int(os.getenv("MAX_UPLOAD_SIZE", str(10 * 1024 * 1024)))  # 10MB per file
MAX_UPLOAD_FILES = int(os.getenv("MAX_UPLOAD_FILES", "50"))

# Bookings
BOOKING_EDIT_WINDOW_MINUTES = int(os.getenv("BOOKING_EDIT_WINDOW_MINUTES", "60"))

# Scheduled Excel export
EXPORTS_DIR = os.getenv("EXPORTS_DIR", str(Path(__file__).resolve().parent.parent / "exports"))
EXPORT_TIMEZONE = os.getenv("EXPORT_TIMEZONE", "America/New_York")
EXPORT_SCHEDULER_ENABLED = os.getenv("EXPORT_SCHEDULER_ENABLED", "true").lower() == "true"
EXPORT_RETENTION_DAYS = int(os.getenv("EXPORT_RETENTION_DAYS", "30"))
