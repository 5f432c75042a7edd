from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class CandidateBinary:
    """A freshly fetched executable waiting to replace the installed one."""

    path: Path
    """Location of the downloaded binary"""

    version: str
    """Version the binary claims to be, e.g. 'v0.5.0'"""

    @property
    def bare_version(self) -> str:
        """Version without the leading 'v', as the binary prints it."""
        return self.version.removeprefix("v")
