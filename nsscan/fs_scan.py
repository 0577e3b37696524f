from __future__ import annotations

import io
import logging
import os
import re
import zipfile
from typing import Iterator, List, Optional, TextIO

from .config import ReaderOptions, default_reader_options
from .errors import CorruptArchiveError, UnreadableFileError
from .extract import iter_namespace_forms
from .model import FileScan, NamespaceForm
from .reader import read_forms

logger = logging.getLogger(__name__)


# ".clj" host sources and ".cljc" portable sources
SOURCE_FILE_PATTERN = re.compile(r".*\.cljc?")
ARCHIVE_SUFFIXES = (".jar", ".zip")
SOURCE_ENCODING = "utf-8"


def is_source_name(name: str) -> bool:
	return SOURCE_FILE_PATTERN.fullmatch(os.path.basename(name)) is not None


def is_source_file(path: str) -> bool:
	return os.path.isfile(path) and is_source_name(path) and os.access(path, os.R_OK)


def is_archive(path: str) -> bool:
	return os.path.isfile(path) and path.lower().endswith(ARCHIVE_SUFFIXES)


def scan_stream(
	stream: TextIO,
	source: str,
	first_only: bool = False,
	options: Optional[ReaderOptions] = None,
) -> FileScan:
	"""Read the namespace forms of an already opened stream.

	A read failure does not raise; the forms found before it are kept and the
	result is marked unreadable.
	"""
	forms: List[NamespaceForm] = []
	stop = (lambda _: True) if first_only else None
	try:
		for ns_form in iter_namespace_forms(
			read_forms(stream, options or default_reader_options(), source, ignore_unreadable=False),
			source,
			stop=stop,
		):
			forms.append(ns_form)
	except Exception as exc:
		# skip unreadable files; anything after the failure is lost
		logger.debug("unreadable %s: %s", source, exc)
		return FileScan(path=source, forms=forms, error=str(exc), cause=exc)
	return FileScan(path=source, forms=forms)


def scan_file(path: str, first_only: bool = False, options: Optional[ReaderOptions] = None) -> FileScan:
	try:
		with open(path, "r", encoding=SOURCE_ENCODING) as fh:
			return scan_stream(fh, path, first_only, options)
	except OSError as exc:
		logger.debug("cannot open %s: %s", path, exc)
		return FileScan(path=path, error=str(exc), cause=exc)


def _checked(scan: FileScan, ignore_unreadable: bool) -> Optional[List[NamespaceForm]]:
	if not scan.unreadable:
		return scan.forms
	if not ignore_unreadable:
		raise UnreadableFileError(scan.path, scan.error or "unknown error") from scan.cause
	return scan.forms or None


def ns_forms_for_file(
	path: str,
	ignore_unreadable: bool = True,
	options: Optional[ReaderOptions] = None,
) -> Optional[List[NamespaceForm]]:
	"""Return all namespace forms found in the given file.

	Returns an empty list if no namespace form was found, and None if
	``ignore_unreadable`` is set and the file could not be read at all.
	"""
	return _checked(scan_file(path, options=options), ignore_unreadable)


def ns_form_for_file(
	path: str,
	ignore_unreadable: bool = True,
	options: Optional[ReaderOptions] = None,
) -> Optional[NamespaceForm]:
	"""Return the first namespace form in the given file.

	Returns None if no namespace form was found, or if ``ignore_unreadable``
	is set and the file was unreadable.
	"""
	forms = _checked(scan_file(path, first_only=True, options=options), ignore_unreadable)
	return forms[0] if forms else None


def iter_source_files(root: str) -> Iterator[str]:
	for dirpath, dirnames, filenames in os.walk(root):
		for filename in filenames:
			path = os.path.join(dirpath, filename)
			if is_source_file(path):
				yield path


def namespace_forms_in_dir(
	root: str,
	ignore_unreadable: bool = True,
	options: Optional[ReaderOptions] = None,
	first_only: bool = True,
) -> List[NamespaceForm]:
	"""Return the namespace forms of every source file under ``root``.

	One form per file in ``first_only`` mode, in directory traversal order.
	"""
	results: List[NamespaceForm] = []
	for path in iter_source_files(root):
		forms = _checked(scan_file(path, first_only, options), ignore_unreadable)
		if forms:
			results.extend(forms)
	return results


def namespace_forms_in_archive(
	path: str,
	ignore_unreadable: bool = True,
	options: Optional[ReaderOptions] = None,
	first_only: bool = True,
) -> List[NamespaceForm]:
	"""Return the namespace forms of every source entry inside a jar/zip.

	An archive that cannot be opened raises CorruptArchiveError whatever the
	value of ``ignore_unreadable``.
	"""
	results: List[NamespaceForm] = []
	try:
		archive = zipfile.ZipFile(path)
	except (zipfile.BadZipFile, OSError) as exc:
		raise CorruptArchiveError(path) from exc
	with archive:
		for info in archive.infolist():
			if info.is_dir() or not is_source_name(info.filename):
				continue
			forms = _checked(_scan_archive_entry(archive, info, path, first_only, options), ignore_unreadable)
			if forms:
				results.extend(forms)
	return results


def _scan_archive_entry(
	archive: zipfile.ZipFile,
	info: zipfile.ZipInfo,
	archive_path: str,
	first_only: bool,
	options: Optional[ReaderOptions],
) -> FileScan:
	source = f"{archive_path}!{info.filename}"
	try:
		with archive.open(info) as raw, io.TextIOWrapper(raw, encoding=SOURCE_ENCODING) as fh:
			return scan_stream(fh, source, first_only, options)
	except Exception as exc:
		logger.debug("cannot open %s: %s", source, exc)
		return FileScan(path=source, error=str(exc), cause=exc)
