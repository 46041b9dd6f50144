import pytest

from recipe_narrative.settings import validate_settings


def test_validate_settings_accepts_integers(monkeypatch):
    monkeypatch.setenv("MIN_BLOCK_CHARS", "40")
    monkeypatch.setenv("IMAGE_SEED", "")
    validate_settings()


def test_validate_settings_rejects_non_integers(monkeypatch):
    monkeypatch.setenv("MIN_BLOCK_CHARS", "abc")
    with pytest.raises(RuntimeError) as exc:
        validate_settings()
    assert "MIN_BLOCK_CHARS" in str(exc.value)
