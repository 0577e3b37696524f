from __future__ import annotations

from typing import Dict, Iterable, List

from .model import NamespaceForm, NamespaceInfo, ScanSummary
from .names import doc_from_ns_form


def to_info(ns_form: NamespaceForm) -> NamespaceInfo:
	return NamespaceInfo(
		name=ns_form.name,
		kind=ns_form.kind,
		doc=doc_from_ns_form(ns_form),
		source=ns_form.source,
		form=str(ns_form),
	)


def _container(source: str) -> str:
	# archive entries are reported as "archive!entry"
	return source.split("!", 1)[0] if "!" in source else source


def summarize_namespace(info: NamespaceInfo) -> str:
	parts: List[str] = [f"Namespace {info.name} ({info.kind})"]
	if info.source:
		parts.append(f"in {info.source}")
	text = " ".join(parts)
	doc_lines = (info.doc or "").strip().splitlines()
	if doc_lines:
		text += f": {doc_lines[0]}"
	return text


def summarize_scan(infos: Iterable[NamespaceInfo]) -> ScanSummary:
	infos = list(infos)
	per_namespace: Dict[str, str] = {}
	for info in infos:
		per_namespace.setdefault(info.name, summarize_namespace(info))

	counts: Dict[str, int] = {}
	for info in infos:
		key = _container(info.source or "")
		counts[key] = counts.get(key, 0) + 1
	per_source = {src: f"{src or '<unknown>'}: {n} namespace forms" for src, n in counts.items()}

	documented = len([i for i in infos if i.doc])
	global_overview = (
		f"{len(infos)} namespace forms, {len(per_namespace)} distinct namespaces, "
		f"{documented} documented"
	)

	return ScanSummary(
		global_overview=global_overview,
		per_source=per_source,
		per_namespace=per_namespace,
	)
