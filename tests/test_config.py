import json
import os

import pytest

from maskcheck.config import ScanConfig, parse_allowed
from maskcheck.errors import ConfigurationError


ENV = ("MASKCHECK_ALLOWED", "MASKCHECK_EXTRA_SCRIPTS", "MASKCHECK_DIALECT", "MASKCHECK_ON_UNREADABLE")


@pytest.fixture
def clean_env(monkeypatch):
	for name in ENV:
		monkeypatch.delenv(name, raising=False)
	return monkeypatch


def test_defaults(clean_env):
	config = ScanConfig.from_env()
	assert config.allowed == []
	assert config.extra_scripts == []
	assert config.default_dialect == "r"
	assert config.on_unreadable == "abort"


def test_from_env(clean_env):
	clean_env.setenv("MASKCHECK_ALLOWED", "n:dplyr, filter:any,select")
	clean_env.setenv("MASKCHECK_EXTRA_SCRIPTS", os.pathsep.join(["a.R", "", "self"]))
	clean_env.setenv("MASKCHECK_DIALECT", "python")
	clean_env.setenv("MASKCHECK_ON_UNREADABLE", "skip")
	config = ScanConfig.from_env()
	assert [(e.name, e.scope) for e in config.allowed] == [
		("n", "dplyr"),
		("filter", "any"),
		("select", "any"),
	]
	assert config.extra_scripts == ["a.R", "self"]
	assert config.default_dialect == "python"
	assert config.on_unreadable == "skip"


def test_empty_allowed_means_none(clean_env):
	clean_env.setenv("MASKCHECK_ALLOWED", "")
	assert ScanConfig.from_env().allowed == []


def test_invalid_env(clean_env):
	clean_env.setenv("MASKCHECK_ON_UNREADABLE", "sometimes")
	with pytest.raises(ConfigurationError):
		ScanConfig.from_env()


def test_allow_entry_needs_name():
	with pytest.raises(ConfigurationError):
		parse_allowed(":dplyr")


def test_from_file(tmp_path):
	path = tmp_path / "maskcheck.json"
	path.write_text(json.dumps({"allowed": [{"name": "n", "scope": "dplyr"}], "extra_scripts": ["self"]}))
	config = ScanConfig.from_file(str(path))
	assert config.allowed[0].scope == "dplyr"
	assert config.extra_scripts == ["self"]


def test_from_file_errors(tmp_path):
	with pytest.raises(ConfigurationError):
		ScanConfig.from_file(str(tmp_path / "missing.json"))
	bad = tmp_path / "bad.json"
	bad.write_text("{not json")
	with pytest.raises(ConfigurationError):
		ScanConfig.from_file(str(bad))
	invalid = tmp_path / "invalid.json"
	invalid.write_text(json.dumps({"default_dialect": "cobol"}))
	with pytest.raises(ConfigurationError):
		ScanConfig.from_file(str(invalid))
