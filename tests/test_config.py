"""Tests for AppConfig.from_env."""

import os

import pytest

from qap_scorer.config import DEFAULT_SCORE_URL, AppConfig

ENV_VARS = (
    "QAP_SCORE_URL",
    "QAP_SCORE_API_KEY",
    "GOOGLE_MAPS_API_KEY",
    "QAP_APPLICATION_YEAR",
    "QAP_HTTP_TIMEOUT",
    "QAP_TRANSPORT_RETRIES",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # keep a developer's .env out of the tests
    monkeypatch.chdir(tmp_path)


def test_defaults(tmp_path):
    config = AppConfig.from_env(str(tmp_path / "missing.env"))
    assert config.score_url == DEFAULT_SCORE_URL
    assert config.application_year == 2024
    assert config.transport_retries == 0
    assert config.score_api_key == ""


def test_reads_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("QAP_SCORE_URL", "https://scorer.example/score")
    monkeypatch.setenv("QAP_SCORE_API_KEY", "score-key")
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "maps-key")
    monkeypatch.setenv("QAP_APPLICATION_YEAR", "2025")
    monkeypatch.setenv("QAP_HTTP_TIMEOUT", "12.5")
    monkeypatch.setenv("QAP_TRANSPORT_RETRIES", "1")

    config = AppConfig.from_env(str(tmp_path / "missing.env"))

    assert config.score_url == "https://scorer.example/score"
    assert config.score_api_key == "score-key"
    assert config.geocoding_api_key == "maps-key"
    assert config.application_year == 2025
    assert config.http_timeout == 12.5
    assert config.transport_retries == 1


def test_reads_dotenv_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("QAP_APPLICATION_YEAR=2023\n")
    try:
        config = AppConfig.from_env(str(env_file))
    finally:
        # load_dotenv writes into os.environ
        os.environ.pop("QAP_APPLICATION_YEAR", None)
    assert config.application_year == 2023


@pytest.mark.parametrize("name, raw", [
    ("QAP_APPLICATION_YEAR", "next year"),
    ("QAP_HTTP_TIMEOUT", "-1"),
])
def test_invalid_numbers_name_the_variable(monkeypatch, tmp_path, name, raw):
    monkeypatch.setenv(name, raw)
    with pytest.raises(ValueError, match=name):
        AppConfig.from_env(str(tmp_path / "missing.env"))


@pytest.mark.parametrize("name, raw", [
    ("QAP_HTTP_TIMEOUT", "0"),
    ("QAP_HTTP_TIMEOUT", "0.0"),
    ("QAP_APPLICATION_YEAR", "0"),
])
def test_zero_rejected_where_a_positive_value_is_required(monkeypatch, tmp_path, name, raw):
    monkeypatch.setenv(name, raw)
    with pytest.raises(ValueError, match=f"{name} must be greater than zero"):
        AppConfig.from_env(str(tmp_path / "missing.env"))


def test_non_finite_timeout_rejected(monkeypatch, tmp_path):
    monkeypatch.setenv("QAP_HTTP_TIMEOUT", "nan")
    with pytest.raises(ValueError, match="QAP_HTTP_TIMEOUT must be finite"):
        AppConfig.from_env(str(tmp_path / "missing.env"))


def test_zero_retries_allowed(monkeypatch, tmp_path):
    monkeypatch.setenv("QAP_TRANSPORT_RETRIES", "0")
    assert AppConfig.from_env(str(tmp_path / "missing.env")).transport_retries == 0
