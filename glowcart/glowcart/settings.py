"""
Settings for the GlowCart storefront.

The storefront keeps no catalogue or orders of its own: products, orders and
user profiles live behind the shop API configured by SHOP_API_URL.
"""

import os
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

# Приоритет: DJANGO_ENV_FILE -> .env
_explicit_env_file = os.environ.get('DJANGO_ENV_FILE')
if _explicit_env_file:
    load_dotenv(_explicit_env_file)
else:
    load_dotenv(BASE_DIR / '.env')


def _env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes')


SECRET_KEY = os.environ.get('SECRET_KEY', 'django-insecure-glowcart-dev-key')

DEBUG = _env_bool('DEBUG', False)

_allowed_hosts_env = os.environ.get('ALLOWED_HOSTS')
if _allowed_hosts_env:
    ALLOWED_HOSTS = [h.strip() for h in _allowed_hosts_env.split(',') if h.strip()]
else:
    ALLOWED_HOSTS = ['localhost', '127.0.0.1', 'testserver']

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'rest_framework',
    'storefront',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    'storefront.middleware.CartMiddleware',
]

ROOT_URLCONF = 'glowcart.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.messages.context_processors.messages',
                'storefront.context_processors.cart_context',
                'storefront.context_processors.session_user',
            ],
        },
    },
]

WSGI_APPLICATION = 'glowcart.wsgi.application'

# Сессии и тестовый раннер используют локальную SQLite
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.environ.get('DATABASE_PATH', BASE_DIR / 'db.sqlite3'),
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'glowcart-default',
        'TIMEOUT': 300,
    }
}

SESSION_ENGINE = 'django.contrib.sessions.backends.cached_db'
SESSION_COOKIE_AGE = 60 * 60 * 24 * 14
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = 'Lax'

MESSAGE_STORAGE = 'django.contrib.messages.storage.session.SessionStorage'

LANGUAGE_CODE = 'en-in'
TIME_ZONE = 'Asia/Kolkata'
USE_I18N = True
USE_TZ = True

STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LOGIN_URL = '/login/'

# Shop API
SHOP_API_URL = os.environ.get('SHOP_API_URL', 'http://localhost:8080/api')
SHOP_API_TIMEOUT = float(os.environ.get('SHOP_API_TIMEOUT', '10'))

# Корзина и оформление заказа
STOREFRONT_TAX_RATE = Decimal(os.environ.get('STOREFRONT_TAX_RATE', '0.18'))
STOREFRONT_SHIPPING_FEE = Decimal(os.environ.get('STOREFRONT_SHIPPING_FEE', '8.99'))
STOREFRONT_FREE_SHIPPING_THRESHOLD = Decimal(
    os.environ.get('STOREFRONT_FREE_SHIPPING_THRESHOLD', '75')
)
STOREFRONT_DELIVERY_CITY = os.environ.get('STOREFRONT_DELIVERY_CITY', 'Patna')
STOREFRONT_DELIVERY_STATE = os.environ.get('STOREFRONT_DELIVERY_STATE', 'Bihar')
STOREFRONT_PRICE_CEILING = Decimal(os.environ.get('STOREFRONT_PRICE_CEILING', '200'))

# Геолокация (best-effort, по IP если браузер не передал координаты)
GEOLOCATION_URL = os.environ.get('GEOLOCATION_URL', '')
GEOLOCATION_TIMEOUT = float(os.environ.get('GEOLOCATION_TIMEOUT', '5'))

CATALOG_CACHE_TIMEOUT = int(os.environ.get('CATALOG_CACHE_TIMEOUT', '3600'))

# Настройки логирования
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {name} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'WARNING',
            'propagate': True,
        },
        'storefront': {
            'handlers': ['console'],
            'level': os.environ.get('DJANGO_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
    },
}
