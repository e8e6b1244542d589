from __future__ import annotations
import os
from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "sb_project.settings")

celery_app = Celery("simplebooks")

# CELERY_* keys in settings.py (broker, eager mode, serializer)
celery_app.config_from_object("django.conf:settings", namespace="CELERY")

celery_app.autodiscover_tasks()
