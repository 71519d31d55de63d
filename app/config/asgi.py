"""
ASGI config for the therapy booking payments backend.

Only plain HTTP is served; every view is synchronous and runs in Django's
thread pool under an ASGI server such as Uvicorn.

For more information on this file, see:
https://docs.djangoproject.com/en/5.2/howto/deployment/asgi/
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_asgi_application()
