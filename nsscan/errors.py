"""Error taxonomy for namespace scanning.

- ReaderError: a single form could not be read.
- UnreadableFileError: a file (or archive entry) could not be opened or read.
- CorruptArchiveError: an archive could not be opened or enumerated at all.
"""

from __future__ import annotations

from typing import Optional


class ScanError(Exception):
	"""Base class for every error raised by nsscan."""


class ReaderError(ScanError):
	def __init__(
		self,
		message: str,
		source: Optional[str] = None,
		line: Optional[int] = None,
		column: Optional[int] = None,
	) -> None:
		self.message = message
		self.source = source
		self.line = line
		self.column = column
		location = source or "<stream>"
		if line is not None:
			location = f"{location}:{line}:{column}"
		super().__init__(f"{location}: {message}")


class UnreadableFileError(ScanError):
	def __init__(self, path: str, reason: str) -> None:
		self.path = path
		self.reason = reason
		super().__init__(f"unreadable file {path}: {reason}")


class CorruptArchiveError(ScanError):
	def __init__(self, path: str) -> None:
		self.path = path
		super().__init__(f"archive file corrupt: {path}")
