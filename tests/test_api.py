from fastapi.testclient import TestClient

from api import app


client = TestClient(app)

SCOPES = [
	{"name": "A", "functions": {"foo": "function(x) x"}},
	{"name": "B", "functions": {"foo": "function(x) -x"}},
]


def test_duplicates():
	resp = client.post("/duplicates", json={"scopes": SCOPES})
	assert resp.status_code == 200
	assert resp.json() == [{"name": "foo", "scopes": ["A", "B"]}]


def test_check():
	resp = client.post(
		"/check",
		json={"scopes": SCOPES, "sources": {"s": "result <- foo(1) # foo is great"}},
	)
	assert resp.status_code == 200
	body = resp.json()
	assert body["problems"] is True
	[finding] = body["findings"]["text:s"]
	assert finding["line_number"] == 1
	assert finding["masked_name"] == "foo"


def test_check_allowed():
	resp = client.post(
		"/check",
		json={"scopes": SCOPES, "sources": {"s": "foo(1)"}, "allowed": [{"name": "foo"}]},
	)
	assert resp.status_code == 200
	assert resp.json()["problems"] is False


def test_generic_scopes():
	scopes = [dict(SCOPES[0], generics=["foo"]), SCOPES[1]]
	resp = client.post("/duplicates", json={"scopes": scopes})
	assert resp.json() == []


def test_malformed_deprecation_is_a_bad_request():
	scopes = [SCOPES[0], {"name": "B", "functions": {"foo": ".Deprecated(new = x)"}}]
	resp = client.post("/check", json={"scopes": scopes, "sources": {"s": "foo()"}})
	assert resp.status_code == 400
