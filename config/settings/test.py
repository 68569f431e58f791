"""Settings used by the pytest suite."""

from .base import *  # noqa: F401,F403

DEBUG = False

SECRET_KEY = 'test-secret-key'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

# Fast hashing keeps auth tests quick
PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

STORAGES['staticfiles']['BACKEND'] = 'django.contrib.staticfiles.storage.StaticFilesStorage'  # noqa: F405

# Quiet output; records still propagate to pytest's caplog handler
LOGGING['root'] = {'handlers': [], 'level': 'WARNING'}  # noqa: F405
for _name in ('apps', 'shared'):
    LOGGING['loggers'][_name].update(handlers=[], level='WARNING', propagate=True)  # noqa: F405
