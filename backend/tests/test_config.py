import pytest

import config
from engine.pagination import DEFAULT_PROFILE


def test_capacity_profile_defaults(monkeypatch):
    monkeypatch.delenv("DOCS_HIGH_WATER_FRACTION", raising=False)
    monkeypatch.delenv("DOCS_SIGNATURE_TOLERANCE", raising=False)
    assert config.capacity_profile() == DEFAULT_PROFILE


def test_capacity_profile_reads_environment(monkeypatch):
    monkeypatch.setenv("DOCS_HIGH_WATER_FRACTION", "0.7")
    monkeypatch.setenv("DOCS_SIGNATURE_TOLERANCE", "40")
    profile = config.capacity_profile()
    assert profile.high_water_fraction == 0.7
    assert profile.signature_tolerance == 40.0
    assert profile.capacity == DEFAULT_PROFILE.capacity


@pytest.mark.parametrize("raw", ["abc", "1.5", "-3"])
def test_capacity_profile_ignores_bad_fraction(monkeypatch, raw):
    monkeypatch.setenv("DOCS_HIGH_WATER_FRACTION", raw)
    assert config.capacity_profile().high_water_fraction == DEFAULT_PROFILE.high_water_fraction


def test_allowed_origins(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example,")
    assert config.allowed_origins() == ["https://a.example", "https://b.example"]
    monkeypatch.delenv("ALLOWED_ORIGINS")
    assert config.allowed_origins() == config.DEFAULT_ALLOWED_ORIGINS


def test_default_firm_id(monkeypatch):
    monkeypatch.setenv("DEFAULT_FIRM_ID", "  ")
    assert config.default_firm_id() == "default"
    monkeypatch.setenv("DEFAULT_FIRM_ID", "sample")
    assert config.default_firm_id() == "sample"
