# orderdesk/services/rate_limiter.py
import logging
from datetime import datetime, timedelta, timezone

from sqlmodel import Session

from orderdesk.core.errors import RateLimited
from orderdesk.models.rate_limit import OrderRateLimit
from orderdesk.repositories.rate_limit_repo import RateLimitRepository

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class RateLimiter:
    """
    Fixed-window submission counter keyed by identifier (customer email).

      - no record            -> create (count=1, window_start=now), allow
      - inside the window    -> deny if count >= max, else count += 1, allow
      - window has elapsed   -> reset (count=1, window_start=now), allow

    Read-then-write, not atomic: two concurrent submissions from the same
    identifier can both pass the check. It guards a public form, not billing.
    """

    def __init__(
        self,
        repo: RateLimitRepository,
        max_submissions: int = 5,
        window: timedelta = timedelta(hours=1),
    ):
        self.repo = repo
        self.max_submissions = max_submissions
        self.window = window

    def check_and_record(
        self,
        session: Session,
        identifier: str,
        now: datetime | None = None,
    ) -> OrderRateLimit:
        """
        Count one submission for `identifier`.

        Raises:
            RateLimited: the identifier already used up the current window.
                Nothing is written in that case.
        """
        now = now or datetime.now(timezone.utc)
        record = self.repo.get_by_identifier(session, identifier)

        if record is None:
            record = OrderRateLimit(
                identifier=identifier,
                submission_count=1,
                window_start=now,
            )
            return self.repo.save(session, record)

        if now - _as_utc(record.window_start) >= self.window:
            record.submission_count = 1
            record.window_start = now
            return self.repo.save(session, record)

        if record.submission_count >= self.max_submissions:
            logger.info("Rate limit exceeded for %s", identifier)
            raise RateLimited()

        record.submission_count += 1
        return self.repo.save(session, record)
