from .base import *

DEBUG = False

SECRET_KEY = 'test-secret-key'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

ALLOWED_HOSTS = ['testserver']

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'
MAINTENANCE_MODE = False
GA_MEASUREMENT_ID = ''
GA_API_SECRET = ''
TEMPLE_API_URL = 'http://backend.test/api'
