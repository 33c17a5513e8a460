from ingest.config import env
from ingest.config.constants import (
  DEFAULT_DOWNLOAD_URL_EXPIRY_SECONDS,
  DEFAULT_UPLOAD_URL_EXPIRY_SECONDS,
)
from ingest.config.env import EnvConfig, get_int_env, get_str_env


def test_get_int_env_returns_default_on_invalid(monkeypatch, capsys):
  monkeypatch.setenv("INVALID_INT", "not-a-number")

  value = get_int_env("INVALID_INT", 7)

  captured = capsys.readouterr()
  assert "Invalid INVALID_INT value" in captured.out
  assert value == 7


def test_get_int_env_parses_value(monkeypatch):
  monkeypatch.setenv("UPLOAD_TTL", "600")

  assert get_int_env("UPLOAD_TTL", 300) == 600


def test_get_str_env_uses_default_when_missing(monkeypatch):
  monkeypatch.delenv("MISSING_STR", raising=False)

  assert get_str_env("MISSING_STR", "fallback") == "fallback"


def test_environment_helpers(monkeypatch):
  monkeypatch.setattr(EnvConfig, "ENVIRONMENT", "prod")
  assert EnvConfig.is_production()
  assert not EnvConfig.is_development()

  monkeypatch.setattr(EnvConfig, "ENVIRONMENT", "local")
  assert EnvConfig.is_development()

  monkeypatch.setattr(EnvConfig, "ENVIRONMENT", "test")
  assert EnvConfig.is_test()


def test_get_aws_config_includes_endpoint_when_set(monkeypatch):
  monkeypatch.setattr(EnvConfig, "AWS_REGION", "eu-west-1")
  monkeypatch.setattr(EnvConfig, "AWS_ENDPOINT_URL", "http://localhost:4566")

  assert EnvConfig.get_aws_config() == {
    "region_name": "eu-west-1",
    "endpoint_url": "http://localhost:4566",
  }


def test_get_aws_config_without_endpoint(monkeypatch):
  monkeypatch.setattr(EnvConfig, "AWS_ENDPOINT_URL", None)

  assert "endpoint_url" not in EnvConfig.get_aws_config()


def test_defaults():
  assert env.DEFAULT_OWNER_ID == "default-user"
  assert env.UPLOAD_URL_EXPIRY_SECONDS == 300
  assert env.DOWNLOAD_URL_EXPIRY_SECONDS == 3600
  assert env.is_test()


def test_url_lifetime_defaults_come_from_constants():
  assert env.UPLOAD_URL_EXPIRY_SECONDS == DEFAULT_UPLOAD_URL_EXPIRY_SECONDS
  assert env.DOWNLOAD_URL_EXPIRY_SECONDS == DEFAULT_DOWNLOAD_URL_EXPIRY_SECONDS
  for unused in ("DEBUG", "HOST", "PORT", "AWS_DEFAULT_REGION"):
    assert not hasattr(EnvConfig, unused)
