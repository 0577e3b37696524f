from __future__ import annotations

import logging
import os
from typing import Iterable, List, Optional, Union

from .config import ReaderOptions
from .fs_scan import is_archive, namespace_forms_in_archive, namespace_forms_in_dir
from .model import NamespaceForm

logger = logging.getLogger(__name__)


CLASSPATH_ENV_VARS = ("NSSCAN_CLASSPATH", "CLASSPATH")

Classpath = Union[str, Iterable[Union[str, os.PathLike]]]


def split_classpath(classpath: str) -> List[str]:
	return [entry for entry in classpath.split(os.pathsep) if entry]


def default_classpath() -> List[str]:
	"""Classpath taken from the environment at call time."""
	for name in CLASSPATH_ENV_VARS:
		value = os.environ.get(name)
		if value:
			return split_classpath(value)
	return []


def classpath_paths(classpath: Optional[Classpath] = None) -> List[str]:
	if classpath is None:
		return default_classpath()
	if isinstance(classpath, str):
		return split_classpath(classpath)
	return [os.fspath(entry) for entry in classpath]


def prefix_to_path(prefix: str) -> str:
	return os.path.join(*prefix.replace("-", "_").split("."))


def file_namespace_forms(
	prefix: Optional[str],
	path: str,
	ignore_unreadable: bool = True,
	options: Optional[ReaderOptions] = None,
	all_forms: bool = False,
) -> List[NamespaceForm]:
	"""Map a classpath entry to the namespace forms it contains.

	For directories ``prefix`` narrows the walk to the matching subdirectory,
	which can save a lot of work on large source trees. For archives the whole
	archive is read and forms are kept when their name starts with ``prefix``.
	"""
	if os.path.isdir(path):
		root = os.path.join(path, prefix_to_path(prefix)) if prefix else path
		return namespace_forms_in_dir(root, ignore_unreadable, options, first_only=not all_forms)
	if is_archive(path):
		forms = namespace_forms_in_archive(path, ignore_unreadable, options, first_only=not all_forms)
		if prefix:
			forms = [f for f in forms if f.symbol.name.startswith(prefix)]
		return forms
	logger.debug("skipping classpath entry %s", path)
	return []


def file_namespaces(prefix: Optional[str], path: str, **kwargs) -> List[str]:
	return [f.name for f in file_namespace_forms(prefix, path, **kwargs)]


def namespace_forms_on_classpath(
	classpath: Optional[Classpath] = None,
	prefix: Optional[str] = None,
	ignore_unreadable: bool = True,
	options: Optional[ReaderOptions] = None,
	all_forms: bool = False,
) -> List[NamespaceForm]:
	"""Return the namespace forms found in the directories and archives of a classpath.

	``classpath`` may be a ``os.pathsep`` separated string or a sequence of
	paths; it defaults to the environment. Results keep classpath order.
	"""
	results: List[NamespaceForm] = []
	for path in classpath_paths(classpath):
		results.extend(file_namespace_forms(prefix, path, ignore_unreadable, options, all_forms))
	return results


def namespaces_on_classpath(
	classpath: Optional[Classpath] = None,
	prefix: Optional[str] = None,
	ignore_unreadable: bool = True,
	options: Optional[ReaderOptions] = None,
	all_forms: bool = False,
) -> List[str]:
	return [
		f.name
		for f in namespace_forms_on_classpath(classpath, prefix, ignore_unreadable, options, all_forms)
	]


def namespaces_in_dir(
	root: str,
	ignore_unreadable: bool = True,
	options: Optional[ReaderOptions] = None,
) -> List[str]:
	return [f.name for f in namespace_forms_in_dir(root, ignore_unreadable, options)]
