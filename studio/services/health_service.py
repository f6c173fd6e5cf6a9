import logging

from sqlalchemy import text
from sqlalchemy.orm import Session

from studio.core.cache import cache_manager


class HealthService:
    def __init__(self, db: Session):
        self.db = db
        self._logger = logging.getLogger(__name__)

    def system_health(self) -> list[dict]:
        database_ok = self._check_database()
        cache_ok, cache_message = self._check_cache()
        return [
            {
                "name": "Database",
                "status": "healthy" if database_ok else "down",
                "message": "DB reachable" if database_ok else "Connection failed",
            },
            {
                "name": "Session cache",
                "status": "healthy" if cache_ok else "degraded",
                "message": cache_message,
            },
        ]

    def _check_database(self) -> bool:
        try:
            self.db.execute(text("SELECT 1"))
            return True
        except Exception as exc:  # pragma: no cover - best effort
            self._logger.warning("Database health check failed: %s", exc)
            return False

    def _check_cache(self) -> tuple[bool, str]:
        backend = cache_manager.get_backend()
        if backend.ping():
            return True, f"{backend.name} cache active"
        self._logger.warning("%s cache health check failed", backend.name)
        return False, f"{backend.name} cache unreachable"
