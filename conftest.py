import pytest


@pytest.fixture(autouse=True)
def _isolated_preferences(tmp_path, monkeypatch):
    # Keep tests away from the user's real preferences file.
    monkeypatch.setenv("ETTE_PREFERENCES", str(tmp_path / "preferences.json"))
