from __future__ import annotations

import os
from typing import Any, Optional, Union

from .extract import normalize_namespace_form
from .forms import Char, Keyword, MapForm, Symbol
from .model import NamespaceForm

DEFAULT_EXTENSION = "clj"
DOC = Keyword("doc")


def _is_string(value: Any) -> bool:
	return isinstance(value, str) and not isinstance(value, Char)


def path_for(namespace: Union[str, Symbol], extension: str = DEFAULT_EXTENSION) -> str:
	"""Relative classpath path of a namespace, e.g. ``foo.bar-baz`` -> ``foo/bar_baz.clj``."""
	return str(namespace).replace("-", "_").replace(".", "/") + "." + extension


def namespace_for_path(path: str) -> str:
	without_ext = os.path.splitext(path)[0]
	return without_ext.replace(os.sep, "/").replace("/", ".").replace("_", "-")


def doc_from_ns_form(ns_form: Union[NamespaceForm, Any]) -> Optional[str]:
	"""Extract the docstring of an ``ns`` form without evaluating it.

	The result is what the namespace's ``:doc`` metadata would be once the
	``ns`` macro had run: reader metadata on the name, then a docstring
	directly after the name, then an attribute map after that, each one
	overriding the previous.
	"""
	if not isinstance(ns_form, NamespaceForm):
		ns_form = normalize_namespace_form(ns_form)
		if ns_form is None:
			return None
	if ns_form.kind != "ns":
		return None

	meta = dict(ns_form.symbol.meta or {})
	references = list(ns_form.rest)
	if references and _is_string(references[0]):
		meta[DOC] = references.pop(0)
	if references and isinstance(references[0], MapForm):
		meta.update(references[0])

	doc = meta.get(DOC)
	return doc if _is_string(doc) else None
