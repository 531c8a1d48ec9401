"""
Celery configuration for the Resource Sharing marketplace.
"""

import os
from celery import Celery
from celery.schedules import crontab

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'resource_sharing.settings')

app = Celery('resource_sharing')

# Settings prefixed with CELERY_ in the Django settings module configure the app.
app.config_from_object('django.conf:settings', namespace='CELERY')

app.autodiscover_tasks()

app.conf.update(
    task_routes={
        'apps.borrowing.tasks.*': {'queue': 'borrowing'},
    },
    worker_prefetch_multiplier=1,
    task_soft_time_limit=300,  # 5 minutes
    task_time_limit=600,       # 10 minutes
    beat_schedule={
        'expire-stale-borrow-requests': {
            'task': 'apps.borrowing.tasks.expire_stale_requests',
            'schedule': crontab(minute=0),
        },
        'borrow-request-summary-report': {
            'task': 'apps.borrowing.tasks.borrow_request_summary_report',
            'schedule': crontab(hour=6, minute=0),
        },
    },
)
