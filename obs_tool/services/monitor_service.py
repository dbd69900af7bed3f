"""
Monitor service for following package builds.

This module polls the build results of a package until every
repository/architecture reaches a final state, reporting each state
change as it is seen.
"""

import logging
import time
from typing import Callable, List, Optional, TYPE_CHECKING

from ..exceptions import BuildFailureError
from ..models import MonitorData, PackageCode
from ..utils.constants import DEFAULT_MONITOR_INTERVAL

if TYPE_CHECKING:
    from ..api import PackageHandle


class MonitorService:
    """
    High-level service following the builds of one package.

    The service is independent of the CLI: state changes are passed to the
    ``report`` callable and the pause between polls goes through ``sleep``
    so both can be replaced.
    """

    def __init__(
        self,
        package: "PackageHandle",
        interval: float = DEFAULT_MONITOR_INTERVAL,
        report: Callable[[str], None] = print,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        """
        Initialize the monitor service.

        Args:
            package: Package to follow
            interval: Seconds between two polls
            report: Called with one line per new target or state change
            sleep: Called with ``interval`` between polls, defaults to time.sleep
        """
        self.package = package
        self.interval = interval
        self.report = report
        self.sleep = sleep or time.sleep
        self.states: List[MonitorData] = []

    def _find(self, data: MonitorData) -> Optional[int]:
        for index, state in enumerate(self.states):
            if state.repository == data.repository and state.arch == data.arch:
                return index
        return None

    def update(self) -> bool:
        """
        Poll the results once and record changes.

        A target is reported when first seen and then whenever its code
        changes; an unknown code never replaces a known one.

        Returns:
            True once every known target has a final code
        """
        result = self.package.result()
        for entry in result.results:
            data = MonitorData.from_result(entry, self.package.name)
            index = self._find(data)
            if index is None:
                self.report(f"* {data.repository} {data.arch} => {data.code}")
                self.states.append(data)
            elif data.code != PackageCode.UNKNOWN and self.states[index].code != data.code:
                self.report(f" * {data.repository} {data.arch} => {data.code}")
                self.states[index] = data

        return all(state.code.is_final for state in self.states)

    def run(self) -> List[MonitorData]:
        """
        Poll until every target is final, then check the outcome.

        Returns:
            Final state of every repository/architecture

        Raises:
            BuildFailureError: If the package is excluded or disabled
                everywhere, or failed somewhere
        """
        logging.info("Monitoring %s/%s every %ss", self.package.project, self.package.name, self.interval)
        while not self.update():
            logging.debug("Builds still running, next poll in %ss", self.interval)
            self.sleep(self.interval)

        check_outcome(self.states)
        return self.states


def check_outcome(states: List[MonitorData]) -> None:
    """
    Raise BuildFailureError unless the final states describe a usable build.

    No targets at all count as excluded everywhere.
    """
    if all(state.code in (PackageCode.EXCLUDED, PackageCode.DISABLED) for state in states):
        raise BuildFailureError("Package excluded/disabled on all repositories/architectures")
    if any(state.code == PackageCode.FAILED for state in states):
        raise BuildFailureError("Build failure detected!")


__all__ = ["MonitorService", "check_outcome"]
