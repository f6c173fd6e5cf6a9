from .daily_digest_scheduler import DailyDigestScheduler

__all__ = ["DailyDigestScheduler"]
