"""Gate for the periodic background refresh

The browser ticks every REFRESH_INTERVAL_SECONDS while the page is mounted.
Each tick is checked against the schedule on the server, so once the view is
paused or torn down a late tick cannot issue another fetch.
"""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class RefreshSchedule:
    running: bool = False
    generation: int = 0

    def started(self) -> "RefreshSchedule":
        """(Re)subscribe; a fresh generation replaces any earlier subscription"""
        return replace(self, running=True, generation=self.generation + 1)

    def stopped(self) -> "RefreshSchedule":
        return replace(self, running=False, generation=self.generation + 1)

    def should_refresh(self, generation: int, refresh_in_flight: bool) -> bool:
        """Whether a tick from `generation` may issue a background fetch

        Ticks from an older subscription are ignored, and a tick is skipped
        while the previous background refresh has not come back yet.
        """
        return self.running and generation == self.generation and not refresh_in_flight
