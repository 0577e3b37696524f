import struct
import zipfile
from textwrap import dedent

import pytest


def write_source(root, rel_path, code):
	path = root / rel_path
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(dedent(code), encoding="utf-8")
	return path


def write_jar(path, entries, compression=zipfile.ZIP_STORED):
	with zipfile.ZipFile(path, "w", compression=compression) as jar:
		for name, code in entries.items():
			jar.writestr(name, dedent(code))
	return path


def damage_entry(jar_path, name, count=8):
	"""Invert the first bytes of an entry's stored data, leaving the archive itself intact."""
	with zipfile.ZipFile(jar_path) as jar:
		info = jar.getinfo(name)
	data = bytearray(jar_path.read_bytes())
	name_len, extra_len = struct.unpack("<HH", data[info.header_offset + 26 : info.header_offset + 30])
	start = info.header_offset + 30 + name_len + extra_len
	for i in range(start, start + min(count, info.compress_size)):
		data[i] ^= 0xFF
	jar_path.write_bytes(bytes(data))


@pytest.fixture
def example_dir(tmp_path):
	write_source(
		tmp_path,
		"a/b.clj",
		"""
		(ns a.b "Doc.")
		(in-ns 'a.c)
		""",
	)
	return tmp_path
