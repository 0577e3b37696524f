from __future__ import annotations

import os
from typing import List, Optional, Union

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from nsscan.classpath import namespace_forms_on_classpath
from nsscan.errors import CorruptArchiveError, UnreadableFileError
from nsscan.fs_scan import ns_forms_for_file, scan_file
from nsscan.model import FileReport, NamespaceReport
from nsscan.names import path_for
from nsscan.summarize import summarize_scan, to_info


app = FastAPI(title="Namespace Scanner")


class ScanRequest(BaseModel):
	classpath: Optional[Union[str, List[str]]] = None
	prefix: Optional[str] = None
	ignore_unreadable: bool = True
	all_forms: bool = False


class FileRequest(BaseModel):
	path: str
	all_forms: bool = True
	ignore_unreadable: bool = True


class PathResponse(BaseModel):
	namespace: str
	path: str


@app.post("/namespaces", response_model=NamespaceReport)
def namespaces(req: ScanRequest) -> NamespaceReport:
	try:
		forms = namespace_forms_on_classpath(
			classpath=req.classpath,
			prefix=req.prefix,
			ignore_unreadable=req.ignore_unreadable,
			all_forms=req.all_forms,
		)
	except (CorruptArchiveError, UnreadableFileError) as e:
		raise HTTPException(status_code=422, detail=str(e))

	infos = [to_info(f) for f in forms]
	return NamespaceReport(namespaces=infos, summary=summarize_scan(infos))


@app.post("/file", response_model=FileReport)
def file(req: FileRequest) -> FileReport:
	path = os.path.abspath(req.path)
	if not os.path.isfile(path):
		raise HTTPException(status_code=400, detail=f"Invalid path: {path}")

	if not req.ignore_unreadable:
		try:
			forms = ns_forms_for_file(path, ignore_unreadable=False) or []
		except UnreadableFileError as e:
			raise HTTPException(status_code=422, detail=str(e))
		if not req.all_forms:
			forms = forms[:1]
		return FileReport(path=path, namespaces=[to_info(f) for f in forms])

	scan = scan_file(path, first_only=not req.all_forms)
	return FileReport(path=path, namespaces=[to_info(f) for f in scan.forms], error=scan.error)


@app.get("/path-for", response_model=PathResponse)
def get_path_for(namespace: str, extension: str = "clj") -> PathResponse:
	return PathResponse(namespace=namespace, path=path_for(namespace, extension))


def create_app() -> FastAPI:
	return app
