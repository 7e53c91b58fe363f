"""
Celery application.

Configuration is read from Django settings under the CELERY_ namespace and
tasks are autodiscovered from installed apps.
"""
import os

from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

app = Celery('tirehub')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()
