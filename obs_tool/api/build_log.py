"""
Access to the build log of a package.

OBS serves the log of the current (or last) build below
``/build/<project>/<repository>/<arch>/<package>/_log``. The log keeps
growing while the job runs, so it is fetched in ranges: every request asks
for the bytes from ``start`` on and the next one continues where the
previous answer ended.
"""

import logging
from typing import TYPE_CHECKING, Iterator, Optional, Tuple

from ..exceptions import UnexpectedResultError
from ..models import LogEntry, PackageLogStreamOptions

if TYPE_CHECKING:
    from .obs_client import ObsClient


class PackageLog:
    """Build log of a package in one repository/architecture."""

    def __init__(self, client: "ObsClient", project: str, package: str, repository: str, arch: str) -> None:
        self.client = client
        self.project = project
        self.package = package
        self.repository = repository
        self.arch = arch

    def _log_url(self, params=None) -> str:
        return self.client._url(  # pylint: disable=protected-access
            "build", self.project, self.repository, self.arch, self.package, "_log", params=params
        )

    @property
    def _target(self) -> str:
        return f"{self.project}/{self.package} in {self.repository}/{self.arch}"

    def entry(self) -> Tuple[int, int]:
        """
        Get the size and modification time of the log.

        Returns:
            Tuple of (size in bytes, mtime as a Unix timestamp)

        Raises:
            UnexpectedResultError: If the server lists no log
        """
        entry = self.client._get_xml(  # pylint: disable=protected-access
            self._log_url([("view", "entry")]), LogEntry, f"get log entry of {self._target}"
        )
        if not entry.entries:
            raise UnexpectedResultError(f"No build log listed for {self._target}")
        return entry.entries[0].size, entry.entries[0].mtime

    def stream(self, options: Optional[PackageLogStreamOptions] = None) -> Iterator[bytes]:
        """
        Stream the log, one range request after the other.

        Streaming stops once a request returns no data, or once ``options.end``
        is reached. Nothing is sent before iteration starts, and an empty range
        (``offset`` equal to ``end``) ends the stream without any request.
        """
        options = options or PackageLogStreamOptions()
        offset = options.offset or 0
        end = options.end

        while end is None or offset < end:
            params = [("nostream", "1"), ("start", str(offset))]
            if end is not None:
                params.append(("end", str(end)))

            received = 0
            for chunk in self.client._stream(  # pylint: disable=protected-access
                self._log_url(params), f"stream log of {self._target}"
            ):
                if chunk:
                    received += len(chunk)
                    yield chunk

            if received == 0:
                break
            offset += received
            logging.debug("Read %d bytes of the log of %s, now at offset %d", received, self._target, offset)


__all__ = ["PackageLog"]
