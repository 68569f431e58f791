"""Development settings for the hotel reservations project.

This module extends the base settings with development specific
configuration, such as enabling debug, allowing all hosts and rendering
logs for a terminal. Do not use these settings in production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Human readable log lines instead of JSON
LOGGING['handlers']['console']['formatter'] = 'console'  # noqa: F405

# Plain static storage; no manifest needed while developing
STORAGES['staticfiles']['BACKEND'] = 'django.contrib.staticfiles.storage.StaticFilesStorage'  # noqa: F405
