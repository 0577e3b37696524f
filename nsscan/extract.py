from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Iterator, List, Optional

from .forms import ListForm, Symbol
from .model import NamespaceForm
from .reader import QUOTE

logger = logging.getLogger(__name__)


NS = Symbol("ns")
IN_NS = Symbol("in-ns")
DECLARATION_KINDS = {NS: "ns", IN_NS: "in-ns"}


def declaration_kind(form: Any) -> Optional[str]:
	"""Return ``"ns"`` or ``"in-ns"`` for a namespace form, else None."""
	if isinstance(form, ListForm) and form and isinstance(form[0], Symbol):
		return DECLARATION_KINDS.get(form[0])
	return None


def drop_quote(form: Any) -> Any:
	if isinstance(form, ListForm) and len(form) == 2 and form[0] == QUOTE:
		return form[1]
	return form


def normalize_namespace_form(form: Any, source: Optional[str] = None) -> Optional[NamespaceForm]:
	"""Canonicalise ``form`` into ``(keyword symbol ...rest)``.

	Returns None when the form is not a namespace form or carries no symbol.
	"""
	kind = declaration_kind(form)
	if kind is None:
		return None
	if len(form) < 2:
		logger.debug("dropping %s form without a name in %s", kind, source)
		return None
	name = form[1]
	if kind == "in-ns":
		name = drop_quote(name)
	if not isinstance(name, Symbol):
		logger.debug("dropping %s form with non-symbol name %r in %s", kind, name, source)
		return None
	canonical = ListForm((form[0], name) + tuple(form[2:]))
	canonical.meta = form.meta
	return NamespaceForm(kind=kind, name=str(name), form=canonical, source=source)


def iter_namespace_forms(
	forms: Iterable[Any],
	source: Optional[str] = None,
	stop: Optional[Callable[[NamespaceForm], bool]] = None,
) -> Iterator[NamespaceForm]:
	"""Yield namespace forms in file order.

	When ``stop`` returns True for a yielded form, no further forms are pulled
	from ``forms``.
	"""
	for form in forms:
		ns_form = normalize_namespace_form(form, source)
		if ns_form is None:
			continue
		yield ns_form
		if stop is not None and stop(ns_form):
			return


def first_namespace_form(forms: Iterable[Any], source: Optional[str] = None) -> Optional[NamespaceForm]:
	for ns_form in iter_namespace_forms(forms, source, stop=lambda _: True):
		return ns_form
	return None


def all_namespace_forms(forms: Iterable[Any], source: Optional[str] = None) -> List[NamespaceForm]:
	return list(iter_namespace_forms(forms, source))
