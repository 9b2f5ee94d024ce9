# We use pytest because the repository standardizes on it for automated checks.
import pytest

# We import the real Settings loader so tests run with the packaged default config.
from nearbyads.config.settings import get_settings
from nearbyads.errors import ConfigError
from nearbyads.store.factory import build_store
from nearbyads.store.memory import InMemoryEntityStore
from nearbyads.store.postgrest import PostgrestEntityStore


@pytest.fixture(autouse=True)
def _fresh_settings():
    # `get_settings` is lru_cached; clear it so env changes in one test do not leak.
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_packaged_defaults_match_search_constants():
    settings = get_settings()

    # These are the documented search constants; search code reads them from here.
    assert settings.search.default_radius_km == 5
    assert settings.search.min_radius_km == 1
    assert settings.search.default_limit == 24
    assert settings.search.km_per_degree_lat == 111.32
    assert settings.search.min_cos_lat == 0.01
    assert settings.search.earth_radius_km == 6371

    # Local runs default to the bundled catalog, not the hosted table.
    assert settings.store.backend == "memory"


def test_env_overrides_are_applied(monkeypatch):
    # Only a small whitelist of env vars is honored; set all of them.
    monkeypatch.setenv("NEARBYADS_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("NEARBYADS_STORE_BACKEND", "postgrest")
    monkeypatch.setenv("SUPABASE_URL", "https://proj.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon-key")

    settings = get_settings()

    assert settings.app.log_level == "DEBUG"
    assert settings.store.backend == "postgrest"
    assert settings.store.url == "https://proj.supabase.co"
    assert settings.store.api_key == "anon-key"


def test_external_config_file_replaces_defaults(monkeypatch, tmp_path):
    # An external YAML file replaces the packaged one; missing keys fall back to model defaults.
    path = tmp_path / "nearbyads.yaml"
    path.write_text("search:\n  default_radius_km: 3\n  default_limit: 12\n", encoding="utf-8")
    monkeypatch.setenv("NEARBYADS_CONFIG_PATH", str(path))

    settings = get_settings()

    assert settings.search.default_radius_km == 3
    assert settings.search.default_limit == 12
    assert settings.search.min_radius_km == 1


def test_build_store_selects_backend():
    settings = get_settings()

    # Default backend: the packaged catalog in memory.
    assert isinstance(build_store(settings), InMemoryEntityStore)

    # Hosted backend with credentials.
    remote = settings.model_copy(
        update={"store": settings.store.model_copy(update={"backend": "postgrest", "url": "https://x.co", "api_key": "k"})}
    )
    assert isinstance(build_store(remote), PostgrestEntityStore)

    # Hosted backend without credentials fails at construction time, not at query time.
    missing_key = settings.model_copy(update={"store": settings.store.model_copy(update={"backend": "postgrest"})})
    with pytest.raises(ConfigError):
        build_store(missing_key)


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        '{"ads": []}',
        '[{"id": "x", "latitude": 123.0, "longitude": 0.0}]',
    ],
)
def test_build_store_reports_broken_catalog_as_config_error(tmp_path, content):
    # Unparseable JSON, a wrong root shape and an out-of-range row are all deployment problems.
    path = tmp_path / "ads.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError, match="catalog"):
        build_store(get_settings(), catalog_path=str(path))


def test_build_store_reports_missing_catalog_as_config_error(tmp_path):
    # A missing file raises OSError inside the loader; callers see a ConfigError.
    with pytest.raises(ConfigError):
        build_store(get_settings(), catalog_path=str(tmp_path / "absent.json"))
