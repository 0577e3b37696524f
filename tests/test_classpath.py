import os

import pytest

from conftest import write_jar, write_source
from nsscan.classpath import (
	classpath_paths,
	file_namespaces,
	namespace_forms_on_classpath,
	namespaces_in_dir,
	namespaces_on_classpath,
	prefix_to_path,
	split_classpath,
)
from nsscan.errors import CorruptArchiveError


def test_example_directory_with_prefix(example_dir):
	assert namespaces_on_classpath([example_dir], prefix="a") == ["a.b"]
	assert namespaces_on_classpath([example_dir], prefix="a", all_forms=True) == ["a.b", "a.c"]


def test_split_classpath():
	text = os.pathsep.join(["src", "", "lib/x.jar"])
	assert split_classpath(text) == ["src", "lib/x.jar"]
	assert classpath_paths(text) == ["src", "lib/x.jar"]


def test_prefix_to_path():
	assert prefix_to_path("my-lib.core") == os.path.join("my_lib", "core")


def test_directory_prefix_narrows_walk(tmp_path):
	write_source(tmp_path, "my_lib/core.clj", "(ns my-lib.core)")
	write_source(tmp_path, "other/x.clj", "(ns other.x)")
	assert namespaces_on_classpath([tmp_path], prefix="my-lib") == ["my-lib.core"]
	assert sorted(namespaces_on_classpath([tmp_path])) == ["my-lib.core", "other.x"]
	assert namespaces_on_classpath([tmp_path], prefix="missing") == []


def test_archive_prefix_filters_symbol_names(tmp_path):
	jar = write_jar(
		tmp_path / "lib.jar",
		{
			"foo/bar.clj": "(ns foo.bar)",
			"baz/qux.clj": "(ns baz.qux)",
			"foo_extra/a.clj": "(ns foo-extra.a)",
		},
	)
	assert file_namespaces("foo", str(jar)) == ["foo.bar", "foo-extra.a"]
	assert file_namespaces("baz", str(jar)) == ["baz.qux"]


def test_entries_keep_classpath_order(tmp_path):
	src = tmp_path / "src"
	write_source(src, "app/core.clj", "(ns app.core)")
	jar = write_jar(tmp_path / "dep.jar", {"dep/core.clj": "(ns dep.core)"})
	notes = write_source(tmp_path, "notes.txt", "(ns not.scanned)")

	classpath = os.pathsep.join([str(jar), str(notes), str(tmp_path / "absent"), str(src)])
	assert namespaces_on_classpath(classpath) == ["dep.core", "app.core"]
	forms = namespace_forms_on_classpath([src, jar])
	assert [f.name for f in forms] == ["app.core", "dep.core"]


def test_default_classpath_from_environment(monkeypatch, example_dir):
	monkeypatch.delenv("CLASSPATH", raising=False)
	monkeypatch.setenv("NSSCAN_CLASSPATH", str(example_dir))
	assert namespaces_on_classpath() == ["a.b"]

	monkeypatch.delenv("NSSCAN_CLASSPATH")
	monkeypatch.setenv("CLASSPATH", str(example_dir))
	assert namespaces_on_classpath() == ["a.b"]

	monkeypatch.delenv("CLASSPATH")
	assert namespaces_on_classpath() == []


def test_corrupt_archive_on_classpath_is_fatal(tmp_path):
	write_source(tmp_path / "src", "ok.clj", "(ns ok)")
	bad = tmp_path / "bad.jar"
	bad.write_bytes(b"PK\x03\x04truncated")
	with pytest.raises(CorruptArchiveError, match="bad.jar"):
		namespaces_on_classpath([tmp_path / "src", bad], ignore_unreadable=True)


def test_namespaces_in_dir(example_dir):
	assert namespaces_in_dir(str(example_dir)) == ["a.b"]
