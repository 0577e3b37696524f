from __future__ import annotations

import argparse
import json
import logging
import sys

import uvicorn

from nsscan.classpath import namespace_forms_on_classpath
from nsscan.config import configure_logging, get_config
from nsscan.errors import ScanError
from nsscan.fs_scan import ns_forms_for_file, scan_file
from nsscan.model import FileReport, NamespaceReport
from nsscan.names import doc_from_ns_form, path_for
from nsscan.summarize import summarize_scan, to_info

logger = logging.getLogger("nsscan.cli")


def _scan(args: argparse.Namespace):
	return namespace_forms_on_classpath(
		classpath=args.classpath,
		prefix=args.prefix,
		ignore_unreadable=not args.strict,
		all_forms=args.all_forms,
	)


def cmd_namespaces(args: argparse.Namespace) -> None:
	names = [f.name for f in _scan(args)]
	if args.json:
		print(json.dumps(names, indent=2))
	else:
		for name in names:
			print(name)


def cmd_forms(args: argparse.Namespace) -> None:
	infos = [to_info(f) for f in _scan(args)]
	report = NamespaceReport(namespaces=infos, summary=summarize_scan(infos))
	print(json.dumps(report.model_dump(), indent=2))


def cmd_file(args: argparse.Namespace) -> None:
	if args.strict:
		forms = ns_forms_for_file(args.path, ignore_unreadable=False) or []
		if not args.all:
			forms = forms[:1]
		report = FileReport(path=args.path, namespaces=[to_info(f) for f in forms])
	else:
		scan = scan_file(args.path, first_only=not args.all)
		report = FileReport(path=scan.path, namespaces=[to_info(f) for f in scan.forms], error=scan.error)
	print(json.dumps(report.model_dump(), indent=2))


def cmd_doc(args: argparse.Namespace) -> None:
	# narrow to the parent package; the namespace itself is a file, not a directory
	parent = args.namespace.rsplit(".", 1)[0] if "." in args.namespace else None
	for ns_form in namespace_forms_on_classpath(classpath=args.classpath, prefix=parent):
		if ns_form.name == args.namespace:
			print(doc_from_ns_form(ns_form) or "")
			return
	logger.error("namespace %s not found", args.namespace)
	sys.exit(1)


def cmd_path_for(args: argparse.Namespace) -> None:
	print(path_for(args.namespace, args.extension))


def cmd_serve(args: argparse.Namespace) -> None:
	uvicorn.run("api:app", host=args.host, port=args.port, reload=args.reload)


def _add_scan_arguments(parser: argparse.ArgumentParser) -> None:
	parser.add_argument("--classpath", default=None, help="Classpath string (defaults to $NSSCAN_CLASSPATH or $CLASSPATH)")
	parser.add_argument("--prefix", default=None, help="Only namespaces starting with this prefix")
	parser.add_argument("--strict", action="store_true", default=not get_config().ignore_unreadable, help="Fail on unreadable files")
	parser.add_argument("--all-forms", action="store_true", help="Report every ns/in-ns form, not just the first per file")


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog="nsscan")
	parser.add_argument("--log-level", default=None, help="Logging level (defaults to $NSSCAN_LOG_LEVEL)")
	sub = parser.add_subparsers(dest="cmd", required=True)

	pn = sub.add_parser("namespaces", help="List namespaces found on the classpath")
	_add_scan_arguments(pn)
	pn.add_argument("--json", action="store_true")
	pn.set_defaults(func=cmd_namespaces)

	pf = sub.add_parser("forms", help="Print namespace forms found on the classpath as JSON")
	_add_scan_arguments(pf)
	pf.set_defaults(func=cmd_forms)

	pfile = sub.add_parser("file", help="Print the namespace forms of a single file as JSON")
	pfile.add_argument("path")
	pfile.add_argument("--all", action="store_true", help="Every form instead of the first")
	pfile.add_argument("--strict", action="store_true")
	pfile.set_defaults(func=cmd_file)

	pd = sub.add_parser("doc", help="Print the docstring of a namespace")
	pd.add_argument("namespace")
	pd.add_argument("--classpath", default=None)
	pd.set_defaults(func=cmd_doc)

	pp = sub.add_parser("path-for", help="Print the relative source path of a namespace")
	pp.add_argument("namespace")
	pp.add_argument("--extension", default="clj")
	pp.set_defaults(func=cmd_path_for)

	ps = sub.add_parser("serve", help="Run FastAPI server")
	ps.add_argument("--host", default="127.0.0.1")
	ps.add_argument("--port", type=int, default=8000)
	ps.add_argument("--reload", action="store_true")
	ps.set_defaults(func=cmd_serve)

	return parser


def main(argv=None) -> None:
	parser = build_parser()
	args = parser.parse_args(argv)
	configure_logging(args.log_level)
	try:
		args.func(args)
	except ScanError as e:
		parser.exit(1, f"nsscan: {e}\n")


if __name__ == "__main__":
	main()
