"""Pydantic models for logfile types, services and per-run results."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from munin_log_events.utils.naming import clean_fieldname


class LogfileType(BaseModel):
    """A named class of log files sharing one event pattern."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Type name, prefix of <type>_logfiles and <type>_regex")
    logfiles: str = Field(description="Whitespace-separated glob patterns of member files")
    regex: str = Field(description="Regular expression counting event lines")

    @property
    def patterns(self) -> list[str]:
        """Individual glob patterns."""
        return self.logfiles.split()


class Service(BaseModel):
    """A graphed service that log files are bound to."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Service name (case-sensitive, canonical key)")
    logbinding: str = Field(description="Pattern searched in full log paths")
    explicit_binding: bool = Field(
        default=False, description="True when <service>_logbinding was configured"
    )
    warning: str | None = Field(default=None, description="Warning threshold")
    critical: str | None = Field(default=None, description="Critical threshold")

    @property
    def fieldname(self) -> str:
        """Munin field identifier for this service."""
        return clean_fieldname(self.name)


class LogfileEntry(BaseModel):
    """A concrete log path and the type it was discovered through."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(description="Log file path as expanded from the glob")
    type_name: str = Field(description="Name of the originating LogfileType")


class FileScan(BaseModel):
    """Outcome of scanning one log file."""

    path: str = Field(description="Scanned log file")
    lines: int = Field(description="Current total line count")
    matches: int = Field(description="Matching lines in the scanned range")
    rotated: bool = Field(
        default=False, description="True when the file shrank and was rescanned from line 1"
    )


class ServiceTotal(BaseModel):
    """Per-service tally, rebuilt on every run."""

    name: str = Field(description="Service name")
    fieldname: str = Field(description="Munin field identifier")
    total: int = Field(default=0, ge=0, description="Matching lines found this run")
    affected: list[str] = Field(
        default_factory=list, description="Log paths that contributed matches"
    )

    @property
    def extinfo(self) -> str:
        """Affected log paths formatted for display."""
        return ", ".join(self.affected)

    def add(self, scan: FileScan) -> None:
        """Account one scanned file to this service."""
        self.total += scan.matches
        if scan.matches > 0:
            self.affected.append(scan.path)

    @classmethod
    def for_service(cls, service: Service) -> ServiceTotal:
        return cls(name=service.name, fieldname=service.fieldname)
