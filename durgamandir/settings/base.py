import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent.parent
load_dotenv(BASE_DIR / ".env")


def _env_bool(name, default=False):
    return os.getenv(name, str(default)).lower() in ("1", "true", "yes", "on")


def _env_list(name, default=""):
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "change-me")
DEBUG = _env_bool("DJANGO_DEBUG", False)
ALLOWED_HOSTS = _env_list("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1")
CSRF_TRUSTED_ORIGINS = _env_list("DJANGO_CSRF_TRUSTED_ORIGINS")

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "durgamandir",
    "homepage",
    "who_we_are",
    "donations",
    "services",
    "festivals",
    "console",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "durgamandir.middleware.LanguageMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "durgamandir.middleware.MaintenanceModeMiddleware",
    "durgamandir.middleware.ConsoleIdleTimeoutMiddleware",
]

ROOT_URLCONF = "durgamandir.urls"

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
                "durgamandir.context_processors.site",
            ],
        },
    },
]

WSGI_APPLICATION = "durgamandir.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.getenv("DJANGO_DB_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "durgamandir",
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = "Asia/Kolkata"
USE_I18N = True
USE_TZ = True

STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"
MEDIA_URL = "/media/"
MEDIA_ROOT = BASE_DIR / "media"

CSRF_FAILURE_VIEW = "durgamandir.views.csrf_failure"
MAINTENANCE_MODE = _env_bool("MAINTENANCE_MODE", False)

# Email
EMAIL_BACKEND = os.getenv("EMAIL_BACKEND", "django.core.mail.backends.smtp.EmailBackend")
EMAIL_HOST = os.getenv("EMAIL_HOST", "localhost")
EMAIL_PORT = int(os.getenv("EMAIL_PORT", "587"))
EMAIL_HOST_USER = os.getenv("EMAIL_HOST_USER", "")
EMAIL_HOST_PASSWORD = os.getenv("EMAIL_HOST_PASSWORD", "")
EMAIL_USE_TLS = _env_bool("EMAIL_USE_TLS", True)
DEFAULT_FROM_EMAIL = os.getenv("DEFAULT_FROM_EMAIL", "noreply@durgamaamandir.org")
EMAIL_FAIL_SILENTLY = _env_bool("EMAIL_FAIL_SILENTLY", True)
CONFIRMATIONS_ADMIN_EMAILS = os.getenv("CONFIRMATIONS_ADMIN_EMAILS", "")

# Temple backend
TEMPLE_API_URL = os.getenv("TEMPLE_API_URL", "http://localhost:8081/api")
TEMPLE_API_TIMEOUT = int(os.getenv("TEMPLE_API_TIMEOUT", "30"))
LOCATION_CACHE_SECONDS = int(os.getenv("LOCATION_CACHE_SECONDS", "600"))
DEFAULT_LOCATION_PATH = _env_list("DEFAULT_LOCATION_PATH", "India,Jharkhand,Hazaribag,Ichak,Mangura")

# Payee identity shown on the donate page
TEMPLE_NAME = os.getenv("TEMPLE_NAME", "Durga Maa Temple")
TEMPLE_UPI_ID = os.getenv("TEMPLE_UPI_ID", "boism-9931690581@boi")
TEMPLE_PAYEE_NAME = os.getenv("TEMPLE_PAYEE_NAME", "Durga Maa Temple")
TEMPLE_BANK_ACCOUNT = os.getenv("TEMPLE_BANK_ACCOUNT", "498010110017772")
TEMPLE_BANK_IFSC = os.getenv("TEMPLE_BANK_IFSC", "BKID0004980")
TEMPLE_BANK_NAME = os.getenv("TEMPLE_BANK_NAME", "BANK OF INDIA")
TEMPLE_BANK_BRANCH = os.getenv("TEMPLE_BANK_BRANCH", "MAMGURA")
TEMPLE_MAP_QUERY = os.getenv("TEMPLE_MAP_QUERY", "3FFH+GP4,Kariyatpur,Mangura,Jharkhand,India")
TEMPLE_CONTACT_PHONE = os.getenv("TEMPLE_CONTACT_PHONE", "+91 99316 90581")
TEMPLE_CONTACT_EMAIL = os.getenv("TEMPLE_CONTACT_EMAIL", "info@durgamaamandir.org")
TODAYS_PRASAD = os.getenv("TODAYS_PRASAD", "Suji Halwa")

# Admin console
CONSOLE_PATH_PREFIX = "/admin/"
CONSOLE_IDLE_TIMEOUT_MINUTES = int(os.getenv("CONSOLE_IDLE_TIMEOUT_MINUTES", "5"))

# Google Analytics 4
GA_MEASUREMENT_ID = os.getenv("GA_MEASUREMENT_ID", "")
GA_API_SECRET = os.getenv("GA_API_SECRET", "")
GA_TIMEOUT = int(os.getenv("GA_TIMEOUT", "5"))

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "root": {"handlers": ["console"], "level": os.getenv("DJANGO_LOG_LEVEL", "INFO")},
    "loggers": {
        "django": {"handlers": ["console"], "level": os.getenv("DJANGO_LOG_LEVEL", "INFO"), "propagate": False},
    },
}
