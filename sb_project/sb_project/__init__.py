# Celery instance is defined in sb_project/celery.py
# Importing it here makes shared_task bind to this app when Django starts
from .celery import celery_app

__all__ = ("celery_app",)

""" Start a worker with "celery -A sb_project worker -l info".
    -A sb_project imports sb_project/__init__.py, which exposes celery_app. """
