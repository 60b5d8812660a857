import pytest

from config import settings


def _clear_config_caches():
    for accessor in (
        settings.get_config,
        settings.get_supabase_config,
        settings.get_aws_config,
        settings.get_portal_config,
        settings.get_logging_config,
    ):
        accessor.cache_clear()


@pytest.fixture(autouse=True)
def local_env(tmp_path, monkeypatch):
    """Every test runs against a fresh local store under tmp_path."""
    monkeypatch.setenv("PORTAL_ENV", "local")
    monkeypatch.setenv("PORTAL_LOCAL_ROOT", str(tmp_path / "store"))
    monkeypatch.setenv("AWS_ATTACHMENTS_BUCKET", "test-attachments")
    _clear_config_caches()
    yield tmp_path
    _clear_config_caches()
