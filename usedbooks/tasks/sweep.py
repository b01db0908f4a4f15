# usedbooks/tasks/sweep.py
from usedbooks.celery_worker import celery_app
from usedbooks.data.database import Database
from usedbooks.repos.cart_repo import CartRepo
from usedbooks.utils.logging import get_logger

logger = get_logger(__name__)

_database: Database | None = None


def _get_database() -> Database:
    global _database
    if _database is None:
        _database = Database()
    return _database


def sweep_carts(database: Database) -> int:
    """
    Usuwa z koszykow linie wskazujace na produkty sprzedane albo usuniete.
    Niezalezne od checkoutu, sprzata to co zostalo po przerwanym purge.
    """
    db = database.session()
    try:
        repo = CartRepo(db)
        removed = repo.purge_unavailable()
        repo.commit()
    finally:
        db.close()

    if removed:
        logger.info(f"Cart sweep removed {removed} stale lines")
    return removed


@celery_app.task(name="usedbooks.tasks.sweep.sweep_carts_task")
def sweep_carts_task():
    logger.info("Cart sweep task started")
    return {"removed": sweep_carts(_get_database())}
