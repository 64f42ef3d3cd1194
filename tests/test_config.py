"""
Tests for settings validation.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from config import SEASON_FALLBACK_POST, Settings, settings


def test_season_fallback_accepts_known_values(monkeypatch):
    monkeypatch.setenv("AQUIFER_SEASON_FALLBACK", " Post_Monsoon ")
    assert Settings().season_fallback == SEASON_FALLBACK_POST


def test_season_fallback_rejects_typo_at_startup(monkeypatch):
    monkeypatch.setenv("AQUIFER_SEASON_FALLBACK", "nearset")
    with pytest.raises(ValidationError):
        Settings()


def test_season_fallback_rejects_typo_on_assignment():
    with pytest.raises(ValidationError):
        settings.season_fallback = "nearset"
    assert settings.season_fallback == "nearest"
