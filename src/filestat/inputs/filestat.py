"""File status input.

Reports, for each configured path, whether the file exists, its size, its
permission mode and optionally an MD5 checksum of its content. Paths are
taken as given; no globbing or expansion happens here.

Error handling has three tiers:
- A missing file is a normal observation (exists=0), never an error.
- A failed stat (other than not-found) or a failed open for checksumming is
  recorded and the batch continues; all such errors are raised together as a
  single GatherError once every path has been attempted.
- A read failure while streaming content into the digest aborts the whole
  gather and re-raises that OSError as-is. Accumulated errors are dropped.
"""

from __future__ import annotations

import hashlib
import os
import stat
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

import structlog

from .base import Accumulator

logger = structlog.get_logger(__name__)

MEASUREMENT = "filestat"
CHUNK_SIZE = 64 * 1024

SAMPLE_CONFIG = """\
[inputs.filestat]
  ## Files to gather stats about.
  files = ["/var/log/syslog"]
  ## If true, read the entire file and calculate an md5 checksum.
  md5 = false
"""


@dataclass
class Observation:
    """Result of probing one path in one gather."""

    path: str
    exists: bool = False
    size_bytes: Optional[int] = None
    mode: Optional[str] = None  # e.g. "-rw-r--r--"
    md5_sum: Optional[str] = None

    def fields(self) -> dict[str, Any]:
        if not self.exists:
            return {"exists": 0}
        fields: dict[str, Any] = {
            "exists": 1,
            "size_bytes": self.size_bytes,
            "mode": self.mode,
        }
        if self.md5_sum is not None:
            fields["md5_sum"] = self.md5_sum
        return fields

    def tags(self) -> dict[str, str]:
        return {"file": self.path}


@dataclass(eq=False)
class GatherError(Exception):
    """Non-fatal per-file errors collected during one gather, in input order."""

    errors: list[str] = field(default_factory=list)
    code: str = "gather_errors"

    @property
    def message(self) -> str:
        return "; ".join(self.errors)

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": {"errors": list(self.errors)},
            "retryable": True,
        }


class FileStat:
    """Input plugin reading stats about a fixed list of files."""

    def __init__(self, files: Optional[Iterable[str]] = None, md5: bool = False):
        self.files: list[str] = list(files or [])
        self.md5 = md5

    def description(self) -> str:
        return "Read stats about given file(s)"

    def sample_config(self) -> str:
        return SAMPLE_CONFIG

    def gather(self, acc: Accumulator) -> None:
        """Emit one observation per configured path into `acc`.

        Raises:
            GatherError: One or more paths failed non-fatally; every
                observation that could be produced was still emitted.
            OSError: Reading file content for the checksum failed after a
                successful open, e.g. EISDIR for a directory. Remaining
                paths are not probed.
        """
        errors: list[str] = []

        for path in self.files:
            observation = Observation(path=path)

            try:
                st = os.stat(path)
            except FileNotFoundError:
                logger.debug("filestat_file_missing", file=path)
                acc.add_fields(MEASUREMENT, observation.fields(), observation.tags())
                continue
            except (OSError, ValueError) as exc:
                # ValueError: embedded null byte in the path
                logger.warning("filestat_stat_failed", file=path, error=str(exc))
                errors.append(str(exc))
                continue

            observation.exists = True
            observation.size_bytes = st.st_size
            observation.mode = stat.filemode(st.st_mode)

            if self.md5:
                observation.md5_sum = self._md5_sum(path, errors)

            acc.add_fields(MEASUREMENT, observation.fields(), observation.tags())

        if errors:
            logger.warning("filestat_gather_errors", error_count=len(errors))
            raise GatherError(errors=errors)

    def _md5_sum(self, path: str, errors: list[str]) -> Optional[str]:
        """Hash the file content, or record an open failure and return None.

        Opens with os.open so directories get past the open and fail on read.
        """
        try:
            fd = os.open(path, os.O_RDONLY)
        except OSError as exc:
            logger.warning("filestat_open_failed", file=path, error=str(exc))
            errors.append(str(exc))
            return None

        digest = hashlib.md5(usedforsecurity=False)
        try:
            while True:
                chunk = os.read(fd, CHUNK_SIZE)
                if not chunk:
                    break
                digest.update(chunk)
        except OSError as exc:
            logger.error("filestat_checksum_read_failed", file=path, error=str(exc))
            raise
        finally:
            os.close(fd)
        return digest.hexdigest()
