"""Models used while monitoring package builds."""

from pydantic import ConfigDict

from .base import ObsToolBaseModel
from .obs_api import PackageCode, ResultListResult


class MonitorData(ObsToolBaseModel):
    """
    Last known build state of a package in one repository/architecture.

    A dirty repository hasn't recalculated its state yet, so its code is
    reported as unknown.
    """

    model_config = ConfigDict(frozen=True)

    repository: str
    arch: str
    code: PackageCode

    @classmethod
    def from_result(cls, result: ResultListResult, package: str) -> "MonitorData":
        if result.dirty:
            code = PackageCode.UNKNOWN
        else:
            status = result.get_status(package)
            code = status.code if status is not None else PackageCode.UNKNOWN
        return cls(repository=result.repository, arch=result.arch, code=code)

    @property
    def target(self) -> str:
        return f"{self.repository}/{self.arch}"


__all__ = ["MonitorData"]
