import pytest

import model_tracker


@pytest.fixture(autouse=True)
def isolated_usage_file(tmp_path, monkeypatch):
    """Keep usage accounting out of the project root."""
    usage_file = tmp_path / "model_usage.json"
    monkeypatch.setattr(model_tracker, "_USAGE_FILE", usage_file)
    return usage_file
