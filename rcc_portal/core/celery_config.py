import os

from celery import Celery

from rcc_portal.core.config import get_redis_url

MAIL_QUEUE = "rcc_mail"


def make_celery(app_name: str = "rcc_portal") -> Celery:
    redis_url = get_redis_url()
    celery = Celery(app_name, broker=redis_url, backend=redis_url, include=["rcc_portal.tasks"])
    celery.conf.task_serializer = "json"
    celery.conf.result_serializer = "json"
    celery.conf.accept_content = ["json"]
    celery.conf.result_expires = 3600
    celery.conf.task_default_queue = MAIL_QUEUE
    # CELERY_TASK_ALWAYS_EAGER=1 runs tasks in-process, no worker or broker needed
    celery.conf.task_always_eager = os.getenv("CELERY_TASK_ALWAYS_EAGER", "0") == "1"
    celery.conf.task_eager_propagates = False
    return celery


celery_app = make_celery()
