import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()  # Load .env file if present

BASE_DIR = Path(__file__).resolve().parents[2]
SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "dev-insecure-key")
DEBUG = os.getenv("DJANGO_DEBUG", "false").lower() in {"1", "true", "yes"}
raw_hosts = os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1")
ALLOWED_HOSTS = [h.strip() for h in raw_hosts.split(",") if h.strip()]

SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")

INSTALLED_APPS = [
    # Django Admin Deps
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Our apps and 3rd party
    "rest_framework",
    "tokenlend.apps.authority.apps.AuthorityConfig",
    "tokenlend.apps.tokens.apps.TokensConfig",
    "tokenlend.apps.users.apps.UsersConfig",
    "tokenlend.apps.loans.apps.LoansConfig",
    "whitenoise.runserver_nostatic",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "whitenoise.middleware.WhiteNoiseMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "tokenlend.urls"
TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ]
        },
    }
]
WSGI_APPLICATION = "tokenlend.wsgi.application"

# Postgres by default; override with dev/test settings as needed
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "HOST": os.getenv("DB_HOST", "localhost"),
        "PORT": os.getenv("DB_PORT", "5432"),
        "NAME": os.getenv("DB_NAME", "tokenlend_db"),
        "USER": os.getenv("DB_USER", "tokenlend_user"),
        "PASSWORD": os.getenv("DB_PASSWORD", "tokenlend_password"),
    }
}

STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {
        "BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"
    },
}

DATABASE_URL = os.getenv("DATABASE_URL")
if DATABASE_URL:
    from urllib.parse import urlparse

    parsed = urlparse(DATABASE_URL)
    DATABASES["default"].update(
        {
            "NAME": parsed.path.lstrip("/"),
            "USER": parsed.username,
            "PASSWORD": parsed.password,
            "HOST": parsed.hostname,
            "PORT": parsed.port or "5432",
            "OPTIONS": {"sslmode": os.getenv("DB_SSLMODE", "require")},
        }
    )

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
        "rest_framework.parsers.FormParser",
    ],
    # public API keyed by wallet address; no sessions, so no CSRF
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "UNAUTHENTICATED_USER": None,
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s [%(name)s] %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "loggers": {
        "tokenlend": {"handlers": ["console"], "level": LOG_LEVEL},
    },
}

# Informational only; the WSGI server decides the bind port
PORT = os.getenv("PORT", "8000")

# ==============================================================================
# Web3 / Blockchain Configuration
# ==============================================================================

# Web3 Provider URL
# For local Hardhat/Anvil: http://127.0.0.1:8545
WEB3_PROVIDER_URL = os.getenv("WEB3_PROVIDER_URL", "http://127.0.0.1:8545")

# Authority (admin) private key, hex encoded. Generate one with
# `python manage.py generate_keypair`.
TOP_AUTHORITY = os.getenv("TOP_AUTHORITY", "")

# Account that tops up the authority's native balance (dev/test networks only)
FAUCET_PRIVATE_KEY = os.getenv("FAUCET_PRIVATE_KEY", "")

# ABI Paths
LENDING_TOKEN_ABI_PATH = BASE_DIR / "onchain" / "abi" / "LendingToken.json"

# Compiled artifact (bytecode) of onchain/contracts/LendingToken.sol, needed
# only to deploy new tokens
LENDING_TOKEN_ARTIFACT_PATH = Path(
    os.getenv(
        "LENDING_TOKEN_ARTIFACT_PATH",
        BASE_DIR / "onchain" / "artifacts" / "LendingToken.json",
    )
)

# A submitted tx is considered expired once the chain moves this many blocks
# past the block observed at submission time without a receipt.
TX_VALID_BLOCKS = int(os.getenv("TX_VALID_BLOCKS", "150"))
TX_CONFIRM_TIMEOUT = int(os.getenv("TX_CONFIRM_TIMEOUT", "120"))
TX_POLL_INTERVAL = float(os.getenv("TX_POLL_INTERVAL", "0.5"))

# ==============================================================================
# Loan request serialization
# ==============================================================================

# Per-wallet lock around loan disbursement; leave empty to disable
LOAN_LOCK_REDIS_URL = os.getenv("LOAN_LOCK_REDIS_URL", "redis://localhost:6379/0")
# Must outlive TX_CONFIRM_TIMEOUT or a second request can enter mid-transfer
LOAN_LOCK_TTL = max(
    int(os.getenv("LOAN_LOCK_TTL", str(TX_CONFIRM_TIMEOUT + 60))), TX_CONFIRM_TIMEOUT
)
