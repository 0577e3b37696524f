import json

import pytest

from cli import main


def test_namespaces_command(example_dir, capsys):
	main(["namespaces", "--classpath", str(example_dir), "--prefix", "a", "--all-forms"])
	assert capsys.readouterr().out.split() == ["a.b", "a.c"]


def test_forms_command(example_dir, capsys):
	main(["forms", "--classpath", str(example_dir)])
	report = json.loads(capsys.readouterr().out)
	assert report["namespaces"][0]["name"] == "a.b"
	assert report["summary"]["global_overview"].startswith("1 namespace forms")


def test_file_command(example_dir, capsys):
	main(["file", str(example_dir / "a" / "b.clj"), "--all"])
	report = json.loads(capsys.readouterr().out)
	assert [n["form"] for n in report["namespaces"]] == ['(ns a.b "Doc.")', "(in-ns a.c)"]
	assert report["error"] is None


def test_doc_command(example_dir, capsys):
	main(["doc", "a.b", "--classpath", str(example_dir)])
	assert capsys.readouterr().out == "Doc.\n"

	with pytest.raises(SystemExit) as exc_info:
		main(["doc", "a.missing", "--classpath", str(example_dir)])
	assert exc_info.value.code == 1


def test_path_for_command(capsys):
	main(["path-for", "foo.bar-baz"])
	assert capsys.readouterr().out == "foo/bar_baz.clj\n"


def test_corrupt_archive_exits_with_error(tmp_path, capsys):
	bad = tmp_path / "bad.jar"
	bad.write_bytes(b"garbage")
	with pytest.raises(SystemExit) as exc_info:
		main(["namespaces", "--classpath", str(bad)])
	assert exc_info.value.code == 1
	assert "archive file corrupt" in capsys.readouterr().err
