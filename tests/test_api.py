from fastapi.testclient import TestClient

from api import app
from conftest import write_source


client = TestClient(app)


def test_namespaces_endpoint(example_dir):
	resp = client.post("/namespaces", json={"classpath": [str(example_dir)], "prefix": "a", "all_forms": True})
	assert resp.status_code == 200
	body = resp.json()
	assert [n["name"] for n in body["namespaces"]] == ["a.b", "a.c"]
	assert body["namespaces"][0]["doc"] == "Doc."
	assert body["namespaces"][1]["form"] == "(in-ns a.c)"
	assert body["summary"]["global_overview"].startswith("2 namespace forms")


def test_corrupt_archive_is_reported(tmp_path):
	bad = tmp_path / "bad.jar"
	bad.write_bytes(b"garbage")
	resp = client.post("/namespaces", json={"classpath": str(bad)})
	assert resp.status_code == 422
	assert "bad.jar" in resp.json()["detail"]


def test_file_endpoint(example_dir, tmp_path):
	path = str(example_dir / "a" / "b.clj")
	resp = client.post("/file", json={"path": path})
	assert resp.status_code == 200
	assert [n["name"] for n in resp.json()["namespaces"]] == ["a.b", "a.c"]

	resp = client.post("/file", json={"path": path, "all_forms": False})
	assert [n["name"] for n in resp.json()["namespaces"]] == ["a.b"]

	broken = write_source(tmp_path, "broken.clj", "(ns")
	resp = client.post("/file", json={"path": str(broken)})
	assert resp.status_code == 200
	assert resp.json()["error"]
	resp = client.post("/file", json={"path": str(broken), "ignore_unreadable": False})
	assert resp.status_code == 422

	resp = client.post("/file", json={"path": str(tmp_path / "missing.clj")})
	assert resp.status_code == 400


def test_path_for_endpoint():
	resp = client.get("/path-for", params={"namespace": "foo.bar-baz", "extension": "cljc"})
	assert resp.json() == {"namespace": "foo.bar-baz", "path": "foo/bar_baz.cljc"}
