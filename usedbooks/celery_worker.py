# usedbooks/celery_worker.py
from celery import Celery

from usedbooks.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND, CART_SWEEP_SECONDS

celery_app = Celery(
    "usedbooks",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# taski trzeba zaimportowac jawnie, zeby Celery je zarejestrowal
celery_app.conf.imports = (
    "usedbooks.tasks.sweep",
)

celery_app.conf.beat_schedule = {
    "sweep-stale-cart-lines": {
        "task": "usedbooks.tasks.sweep.sweep_carts_task",
        "schedule": float(CART_SWEEP_SECONDS),
    },
}

celery_app.conf.timezone = "UTC"
