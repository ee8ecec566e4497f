# ========================================
# jobplatform/config.py - ENVIRONMENT SETTINGS
# ========================================

import os
from pathlib import Path
from dotenv import load_dotenv

# Look for .env next to the package first, then fall back to the cwd
package_dir = Path(__file__).resolve().parent
env_path = package_dir.parent / ".env"

if env_path.exists():
    load_dotenv(dotenv_path=env_path)
else:
    load_dotenv()

# 1. DATABASE
MONGO_URI = os.getenv("MONGO_URI")
DATABASE_NAME = os.getenv("DATABASE_NAME", "jobPlatform")

# 2. AUTH
SECRET_KEY = os.getenv("SECRET_KEY") or os.getenv("JWT_SECRET", "super_secret_random_key_CHANGE_THIS")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))

# 3. HTTP
raw_origins = os.getenv("ALLOWED_ORIGINS", "http://localhost:5173")
ALLOWED_ORIGINS = [o.strip() for o in raw_origins.split(",") if o.strip()]

# 4. FILE STORAGE
UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", "uploads")).resolve()
MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "5"))
DEFAULT_COMPANY_LOGO = "/uploads/default.png"

# 5. LOGGING
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
