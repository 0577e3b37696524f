from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Symbol:
	name: str
	namespace: Optional[str] = None
	meta: Optional[Dict[Any, Any]] = field(default=None, compare=False, repr=False)

	def __str__(self) -> str:
		if self.namespace:
			return f"{self.namespace}/{self.name}"
		return self.name


@dataclass(frozen=True)
class Keyword:
	name: str
	namespace: Optional[str] = None
	auto_resolved: bool = False

	def __str__(self) -> str:
		if self.auto_resolved:
			return f"::{self.name}" if not self.namespace else f"::{self.namespace}/{self.name}"
		if self.namespace:
			return f":{self.namespace}/{self.name}"
		return f":{self.name}"


class ListForm(tuple):
	"""A parenthesised list, e.g. ``(ns foo.bar)``."""

	meta: Optional[Dict[Any, Any]] = None

	def __repr__(self) -> str:
		return f"ListForm({tuple.__repr__(self)})"


class Vector(tuple):
	meta: Optional[Dict[Any, Any]] = None

	def __repr__(self) -> str:
		return f"Vector({tuple.__repr__(self)})"


class MapForm(dict):
	meta: Optional[Dict[Any, Any]] = None


class SetForm(frozenset):
	meta: Optional[Dict[Any, Any]] = None


class Char(str):
	"""A character literal such as ``\\a``."""


@dataclass(frozen=True)
class Regex:
	pattern: str


@dataclass(frozen=True)
class Tagged:
	tag: Symbol
	form: Any


def with_meta(form: Any, meta: Dict[Any, Any]) -> Any:
	"""Return ``form`` carrying ``meta`` merged over any metadata it already has.

	Values that cannot hold metadata (strings, numbers, keywords) are returned
	unchanged, mirroring how the reader ignores metadata on them.
	"""
	if isinstance(form, Symbol):
		merged = dict(form.meta or {})
		merged.update(meta)
		return Symbol(form.name, form.namespace, merged)
	if isinstance(form, (ListForm, Vector, MapForm, SetForm)):
		copy = type(form)(form)
		merged = dict(form.meta or {})
		merged.update(meta)
		copy.meta = merged
		return copy
	return form


_CHAR_NAMES = {
	"\n": "newline",
	" ": "space",
	"\t": "tab",
	"\b": "backspace",
	"\f": "formfeed",
	"\r": "return",
}


def _pr_seq(items, open_: str, close: str) -> str:
	return open_ + " ".join(pr_str(x) for x in items) + close


def pr_str(form: Any) -> str:
	"""Print a form back as Clojure source text."""
	if form is None:
		return "nil"
	if form is True:
		return "true"
	if form is False:
		return "false"
	if isinstance(form, Char):
		return "\\" + _CHAR_NAMES.get(str(form), str(form))
	if isinstance(form, str):
		return json.dumps(form, ensure_ascii=False)
	if isinstance(form, (Symbol, Keyword)):
		return str(form)
	if isinstance(form, ListForm):
		return _pr_seq(form, "(", ")")
	if isinstance(form, Vector):
		return _pr_seq(form, "[", "]")
	if isinstance(form, SetForm):
		return _pr_seq(form, "#{", "}")
	if isinstance(form, dict):
		return "{" + ", ".join(f"{pr_str(k)} {pr_str(v)}" for k, v in form.items()) + "}"
	if isinstance(form, Regex):
		return '#"' + form.pattern + '"'
	if isinstance(form, Tagged):
		return f"#{form.tag} {pr_str(form.form)}"
	return str(form)
