"""ASGI entrypoint.

The admin views are ``async def`` and await the hosted backend, so the
project is served by an ASGI server (``uvicorn config.asgi:application``).
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_asgi_application()
