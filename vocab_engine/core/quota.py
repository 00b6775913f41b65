"""Per-provider call quotas with periodic reset.

State lives for the lifetime of the tracker only; a process restart starts
every counter at zero again.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from ..exceptions import ConfigurationError
from ..logging_config import get_logger
from .interfaces import Clock

logger = get_logger(__name__)

MONTHLY = "monthly"
DAILY = "daily"


def next_reset(now: datetime, period: str = MONTHLY) -> datetime:
    """First instant of the period following ``now``"""
    if period == DAILY:
        start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return start + timedelta(days=1)
    if now.month == 12:
        return datetime(now.year + 1, 1, 1, tzinfo=now.tzinfo)
    return datetime(now.year, now.month + 1, 1, tzinfo=now.tzinfo)


@dataclass
class QuotaState:
    """Usage counter for one provider"""

    used: int
    limit: int
    reset_at: datetime

    @property
    def remaining(self) -> int:
        return max(self.limit - self.used, 0)


class QuotaTracker:
    """Usage counters keyed by provider id.

    ``has_quota`` followed by ``consume`` reproduces the check-then-increment
    pattern: when an await sits between the two, concurrent callers can all
    pass the check. ``try_consume`` does the reset, check and increment in
    one synchronous step and is what the orchestrator uses.
    """

    def __init__(
        self,
        limits: dict[str, int] | None = None,
        default_limit: int = 1000,
        period: str = MONTHLY,
        clock: Clock = datetime.now,
    ):
        if default_limit <= 0:
            raise ConfigurationError(
                "quota.default_limit", default_limit, "must be positive"
            )
        if period not in (MONTHLY, DAILY):
            raise ConfigurationError(
                "quota.reset_period", period, "must be 'monthly' or 'daily'"
            )
        self.default_limit = default_limit
        self.period = period
        self._clock = clock
        self._states: dict[str, QuotaState] = {}
        for provider_id, limit in (limits or {}).items():
            self._register(provider_id, limit)

    def _register(self, provider_id: str, limit: int | None = None) -> QuotaState:
        if limit is None:
            limit = self.default_limit
        if limit <= 0:
            raise ConfigurationError(
                f"quota.limits.{provider_id}", limit, "must be positive"
            )
        state = QuotaState(
            used=0, limit=limit, reset_at=next_reset(self._clock(), self.period)
        )
        self._states[provider_id] = state
        return state

    def _state(self, provider_id: str) -> QuotaState:
        """Look up a provider's state, applying a lazy reset"""
        state = self._states.get(provider_id) or self._register(provider_id)
        now = self._clock()
        if now >= state.reset_at:
            logger.debug(f"Resetting quota for {provider_id}")
            state.used = 0
            state.reset_at = next_reset(now, self.period)
        return state

    def has_quota(self, provider_id: str) -> bool:
        state = self._state(provider_id)
        return state.used < state.limit

    def consume(self, provider_id: str) -> None:
        """Count one call; the caller is expected to have checked ``has_quota``"""
        self._state(provider_id).used += 1

    def try_consume(self, provider_id: str) -> bool:
        """Reserve one call if quota remains"""
        state = self._state(provider_id)
        if state.used >= state.limit:
            return False
        state.used += 1
        return True

    def release(self, provider_id: str) -> None:
        """Roll back one reservation made by ``try_consume``"""
        state = self._state(provider_id)
        if state.used > 0:
            state.used -= 1

    def mark_exhausted(self, provider_id: str) -> None:
        """Treat the provider as out of quota until the next reset"""
        state = self._state(provider_id)
        state.used = state.limit
        logger.warning(
            f"Quota for {provider_id} exhausted until {state.reset_at.isoformat()}"
        )

    def status(self) -> dict[str, dict[str, object]]:
        result: dict[str, dict[str, object]] = {}
        for provider_id in list(self._states):
            state = self._state(provider_id)
            result[provider_id] = {
                "used": state.used,
                "limit": state.limit,
                "remaining": state.remaining,
                "reset_at": state.reset_at,
            }
        return result
