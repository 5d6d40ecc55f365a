"""Development settings.

Extends the base settings with debug mode, permissive hosts and the console
email backend. Do not use these settings in production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Use console email backend during development
EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

# Human-readable logs while developing
LOGGING['formatters']['json']['processor'] = structlog.dev.ConsoleRenderer(colors=False)  # noqa: F405
