"""
Celery application for the back office.

Beat runs three daily jobs:
- medication alert regeneration (01:00)
- due medication alert logging (06:00)
- low stock report (07:00)
"""
import os

from celery import Celery
from celery.schedules import crontab

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'core.settings')

app = Celery('core')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()


# =============================================================================
# BEAT SCHEDULE
# =============================================================================
app.conf.beat_schedule = {
    'refresh-medication-alerts': {
        'task': 'medication_management.tasks.refresh_medication_alerts',
        'schedule': crontab(hour=1, minute=0),
    },
    'log-due-medication-alerts': {
        'task': 'medication_management.tasks.log_due_medication_alerts',
        'schedule': crontab(hour=6, minute=0),
    },
    'report-low-stock': {
        'task': 'inventory.tasks.report_low_stock',
        'schedule': crontab(hour=7, minute=0),
    },
}

app.conf.update(
    # Jobs are short database sweeps
    task_time_limit=120,
    task_soft_time_limit=90,
    result_expires=3600,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    task_serializer='json',
    result_serializer='json',
    accept_content=['json'],
    timezone=os.getenv('TIME_ZONE', 'UTC'),
    enable_utc=True,
)
