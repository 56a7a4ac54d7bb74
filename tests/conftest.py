import pytest

import storage


@pytest.fixture(autouse=True)
def data_dir(tmp_path, monkeypatch):
    """Point every slice at a throwaway directory."""
    monkeypatch.setattr(storage, "BASE_DIR", str(tmp_path))
    return tmp_path
