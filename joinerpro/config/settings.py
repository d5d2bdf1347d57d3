"""
Django settings for the Joiner PRO backend.

Every deployment-specific value is read from the environment with a
development default, so a bare checkout runs against a local SQLite file.
"""
import os
from datetime import timedelta
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def env_int(name, default):
    value = os.environ.get(name)
    return int(value) if value else default


SECRET_KEY = os.environ.get('JOINERPRO_SECRET_KEY', 'django-insecure-joinerpro-dev-key-change-me')

DEBUG = env_bool('JOINERPRO_DEBUG', True)

ALLOWED_HOSTS = [h.strip() for h in os.environ.get('JOINERPRO_ALLOWED_HOSTS', 'localhost,127.0.0.1,testserver').split(',') if h.strip()]


INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'rest_framework',
    'rest_framework_simplejwt',
    'django_filters',
    'joinerpro.core',
    'joinerpro.clients',
    'joinerpro.inventory',
    'joinerpro.projects',
    'joinerpro.finance',
    'joinerpro.reports',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'joinerpro.config.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'joinerpro.config.wsgi.application'


# Database
if os.environ.get('JOINERPRO_DB_ENGINE', 'sqlite') == 'postgres':
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': os.environ.get('JOINERPRO_DB_NAME', 'joinerpro'),
            'USER': os.environ.get('JOINERPRO_DB_USER', 'joinerpro'),
            'PASSWORD': os.environ.get('JOINERPRO_DB_PASSWORD', ''),
            'HOST': os.environ.get('JOINERPRO_DB_HOST', 'localhost'),
            'PORT': os.environ.get('JOINERPRO_DB_PORT', '5432'),
            'CONN_MAX_AGE': env_int('JOINERPRO_DB_CONN_MAX_AGE', 60),
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': os.environ.get('JOINERPRO_SQLITE_PATH', str(BASE_DIR / 'db.sqlite3')),
        }
    }

AUTH_USER_MODEL = 'core.User'

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]


# Internationalization
LANGUAGE_CODE = 'en-us'
TIME_ZONE = os.environ.get('JOINERPRO_TIME_ZONE', 'America/Sao_Paulo')
USE_I18N = True
USE_TZ = True


STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'


REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'rest_framework_simplejwt.authentication.JWTAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
    'EXCEPTION_HANDLER': 'joinerpro.core.exceptions.joinerpro_exception_handler',
    'COERCE_DECIMAL_TO_STRING': False,
}

SIMPLE_JWT = {
    'ACCESS_TOKEN_LIFETIME': timedelta(minutes=env_int('JOINERPRO_ACCESS_TOKEN_MINUTES', 60)),
    'REFRESH_TOKEN_LIFETIME': timedelta(days=env_int('JOINERPRO_REFRESH_TOKEN_DAYS', 7)),
    'AUTH_HEADER_TYPES': ('Bearer',),
}


LOG_LEVEL = os.environ.get('JOINERPRO_LOG_LEVEL', 'INFO').upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{asctime} {levelname} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'joinerpro': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
    },
}


# Business defaults
JOINERPRO_DEFAULT_DELIVERY_DAYS = env_int('JOINERPRO_DEFAULT_DELIVERY_DAYS', 30)
JOINERPRO_DUE_SOON_DAYS = env_int('JOINERPRO_DUE_SOON_DAYS', 7)
JOINERPRO_MAX_INSTALLMENTS = env_int('JOINERPRO_MAX_INSTALLMENTS', 60)
JOINERPRO_DEFAULT_PAYMENT_METHOD = os.environ.get('JOINERPRO_DEFAULT_PAYMENT_METHOD', 'cash')
