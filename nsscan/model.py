from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .forms import ListForm, Symbol, pr_str


class NamespaceForm(BaseModel):
	"""A canonical ``(ns name ...)`` or ``(in-ns name)`` form."""

	model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

	kind: str
	name: str
	form: ListForm
	source: Optional[str] = None

	@property
	def symbol(self) -> Symbol:
		return self.form[1]

	@property
	def rest(self) -> Tuple:
		return tuple(self.form[2:])

	def __str__(self) -> str:
		return pr_str(self.form)


class FileScan(BaseModel):
	model_config = ConfigDict(arbitrary_types_allowed=True)

	path: str
	forms: List[NamespaceForm] = []
	error: Optional[str] = None
	cause: Optional[BaseException] = Field(default=None, exclude=True, repr=False)

	@property
	def unreadable(self) -> bool:
		return self.error is not None


class NamespaceInfo(BaseModel):
	name: str
	kind: str
	doc: Optional[str] = None
	source: Optional[str] = None
	form: str


class ScanSummary(BaseModel):
	global_overview: str
	per_source: Dict[str, str]
	per_namespace: Dict[str, str]


class NamespaceReport(BaseModel):
	namespaces: List[NamespaceInfo]
	summary: ScanSummary


class FileReport(BaseModel):
	path: str
	namespaces: List[NamespaceInfo] = []
	error: Optional[str] = None
