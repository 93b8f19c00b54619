"""
Per-agent request counters with lazily reset minute and hour windows.
"""

import threading
import time
from typing import Callable, Dict, Iterable, Optional

from ..models import AgentType, RateLimitConfig, RateLimitCounter
from ..utils import get_logger

MINUTE_SECONDS = 60
HOUR_SECONDS = 3600


class RateLimiter:
    """
    One counter per agent type, shared by every caller in the process.

    Windows are reset on access rather than by a timer: a minute (or hour)
    that has fully elapsed since ``last_reset`` is cleared the next time the
    counter for that agent type is checked. A single ``last_reset`` stamp
    serves both windows, so under steady traffic the stamp is refreshed every
    minute and the hour counter may never reach its own reset.
    """

    def __init__(self, agent_types: Optional[Iterable[AgentType]] = None,
                 clock: Callable[[], float] = time.time):
        self.clock = clock
        self.logger = get_logger(__name__)
        self._lock = threading.Lock()
        now = self.clock()
        self._counters: Dict[AgentType, RateLimitCounter] = {
            agent_type: RateLimitCounter(last_reset=now)
            for agent_type in (agent_types if agent_types is not None else AgentType)
        }

    def _counter(self, agent_type: AgentType) -> RateLimitCounter:
        counter = self._counters.get(agent_type)
        if counter is None:
            counter = RateLimitCounter(last_reset=self.clock())
            self._counters[agent_type] = counter
        return counter

    def _refresh_windows(self, counter: RateLimitCounter) -> None:
        now = self.clock()
        elapsed = now - counter.last_reset
        if elapsed >= MINUTE_SECONDS:
            counter.minute_count = 0
            if elapsed >= HOUR_SECONDS:
                counter.hour_count = 0
            counter.last_reset = now

    def _within_limits(self, counter: RateLimitCounter, limits: RateLimitConfig) -> bool:
        return (counter.minute_count < limits.requests_per_minute
                and counter.hour_count < limits.requests_per_hour)

    def check_rate_limit(self, agent_type: AgentType, limits: Optional[RateLimitConfig]) -> bool:
        """
        Check whether one more request for the agent type fits its limits.

        Args:
            agent_type: Agent whose counter is checked
            limits: The agent's limits; None always admits

        Returns:
            bool: True if the request may proceed
        """
        if limits is None:
            return True
        with self._lock:
            counter = self._counter(agent_type)
            self._refresh_windows(counter)
            return self._within_limits(counter, limits)

    def increment_request_count(self, agent_type: AgentType) -> None:
        with self._lock:
            counter = self._counter(agent_type)
            counter.minute_count += 1
            counter.hour_count += 1

    def admit(self, agent_type: AgentType, limits: Optional[RateLimitConfig]) -> bool:
        """Check and count a request in one step; rejected requests leave the counter untouched."""
        with self._lock:
            counter = self._counter(agent_type)
            if limits is not None:
                self._refresh_windows(counter)
                if not self._within_limits(counter, limits):
                    self.logger.warning(
                        f"Rate limit reached for {agent_type.value}: "
                        f"{counter.minute_count}/{limits.requests_per_minute} per minute, "
                        f"{counter.hour_count}/{limits.requests_per_hour} per hour"
                    )
                    return False
            counter.minute_count += 1
            counter.hour_count += 1
            return True

    def reset_rate_limits(self) -> None:
        """Zero every counter and restart both windows now."""
        with self._lock:
            now = self.clock()
            for counter in self._counters.values():
                counter.minute_count = 0
                counter.hour_count = 0
                counter.last_reset = now
        self.logger.info("Rate limits reset for all agents")

    def get_request_counts(self) -> Dict[str, Dict[str, int]]:
        with self._lock:
            return {
                agent_type.value: {"minute": counter.minute_count, "hour": counter.hour_count}
                for agent_type, counter in self._counters.items()
            }
