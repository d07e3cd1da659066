"""
Configuration et utilitaires partagés
"""

import os
import hashlib
import secrets
import uuid
from datetime import datetime, timezone
from dotenv import load_dotenv
from pathlib import Path

# Charger .env
ROOT_DIR = Path(__file__).parent
load_dotenv(ROOT_DIR / '.env')

# Storage backend: memory | file | mongo
STORAGE_BACKEND = os.environ.get('STORAGE_BACKEND', 'file').lower()
DATA_DIR = Path(os.environ.get('DATA_DIR', str(ROOT_DIR / 'data')))

# Browser storage caps out around 5 MiB; keep the same ceiling by default
STORAGE_QUOTA_BYTES = int(os.environ.get('STORAGE_QUOTA_BYTES', str(5 * 1024 * 1024)))

# MongoDB
MONGO_URL = os.environ.get('MONGO_URL', 'mongodb://localhost:27017')
DB_NAME = os.environ.get('DB_NAME', 'promoter_pro')

# Role gates (one shared secret per role)
LEAD_USERNAME = os.environ.get('LEAD_USERNAME', 'admin')
LEAD_PASSWORD = os.environ.get('LEAD_PASSWORD', 'admin')
CS_USERNAME = os.environ.get('CS_USERNAME', 'user')
CS_PASSWORD = os.environ.get('CS_PASSWORD', 'password')
PROMOTER_RESET_SECRET = os.environ.get('PROMOTER_RESET_SECRET', 'admin')
SESSION_TTL_HOURS = int(os.environ.get('SESSION_TTL_HOURS', '12'))

# Refresh polling
DASHBOARD_REFRESH_SECONDS = int(os.environ.get('DASHBOARD_REFRESH_SECONDS', '5'))

# AI insight
GEMINI_API_KEY = os.environ.get('GEMINI_API_KEY', '')
GEMINI_MODEL = os.environ.get('GEMINI_MODEL', 'gemini-2.5-flash')
GEMINI_API_URL = os.environ.get(
    'GEMINI_API_URL',
    'https://generativelanguage.googleapis.com/v1beta/models'
)

CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')

# Complaint attachments are stored inline, keep them small
MAX_ATTACHMENT_BYTES = 2 * 1024 * 1024


# ==================== HELPERS ====================

def hash_password(password: str) -> str:
    """Hash un mot de passe avec SHA256"""
    return hashlib.sha256(password.encode()).hexdigest()

def generate_token() -> str:
    """Génère un token de session sécurisé"""
    return secrets.token_urlsafe(32)

def generate_id() -> str:
    """Short opaque record id (9 hex chars)"""
    return uuid.uuid4().hex[:9]

def now_iso() -> str:
    """Retourne la date/heure actuelle en ISO"""
    return datetime.now(timezone.utc).isoformat()

def now_ms() -> int:
    """Epoch milliseconds, the timestamp unit stored on every record"""
    return int(datetime.now(timezone.utc).timestamp() * 1000)
