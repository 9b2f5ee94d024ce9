import json

# We use pytest because the repository standardizes on it for automated checks.
import pytest

# The CLI is tested through `main(argv)` so argument parsing and exit codes are covered too.
from nearbyads.cli import EXIT_CONFIG_ERROR, EXIT_INVALID_ARGUMENT, EXIT_STORE_UNAVAILABLE, main
from nearbyads.config.settings import get_settings
from nearbyads.errors import StoreUnavailable


@pytest.fixture(autouse=True)
def _fresh_settings():
    # Settings are cached per process; env overrides in a test must not leak into the next one.
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _catalog(tmp_path, rows=None):
    # Two ads in Casablanca (inside 5 km of the center) and one in Rabat (~87 km away).
    rows = rows or [
        {"id": "near", "title": "iPhone", "price": 4500, "currency": "MAD", "city": "Casablanca",
         "latitude": 33.5740, "longitude": -7.5900, "created_at": "2025-11-05T18:40:00Z", "status": "active"},
        {"id": "far", "title": "Vélo", "latitude": 33.5862, "longitude": -7.6324, "status": "active"},
        {"id": "rabat", "title": "Café", "latitude": 34.0, "longitude": -6.85, "status": "active"},
    ]
    path = tmp_path / "ads.json"
    path.write_text(json.dumps(rows), encoding="utf-8")
    return path


def test_cli_nearby_json(tmp_path, capsys):
    code = main(["nearby", "--lat", "33.5731", "--lng", "-7.5898", "--radius", "5", "--catalog", str(_catalog(tmp_path)), "--json"])

    # stdout is pure JSON: nearest first, Rabat filtered out.
    assert code == 0
    rows = json.loads(capsys.readouterr().out)
    assert [r["id"] for r in rows] == ["near", "far"]
    assert rows[0]["distance_km"] <= rows[1]["distance_km"]


def test_cli_nearby_text(tmp_path, capsys):
    code = main(["nearby", "--lat", "33.5731", "--lng", "-7.5898", "--catalog", str(_catalog(tmp_path))])

    # Human output is one numbered summary line per hit.
    assert code == 0
    out = capsys.readouterr().out
    assert out.splitlines()[0].startswith(" 1. iPhone | ")


def test_cli_nearby_invalid_center(tmp_path, capsys):
    code = main(["nearby", "--lat", "95", "--lng", "0", "--catalog", str(_catalog(tmp_path))])

    # A bad user argument is exit 2, reported on stderr only.
    assert code == EXIT_INVALID_ARGUMENT
    captured = capsys.readouterr()
    assert "latitude" in captured.err
    assert captured.out == ""


def test_cli_nearby_store_unavailable(monkeypatch, capsys):
    # Swap in a store whose query always fails.
    class DownStore:
        def query_in_bounding_box(self, **_kwargs):
            raise StoreUnavailable("timeout")

    monkeypatch.setattr("nearbyads.cli.build_store", lambda *_a, **_k: DownStore())

    code = main(["nearby", "--lat", "33.5", "--lng", "-7.6"])

    assert code == EXIT_STORE_UNAVAILABLE
    assert "try again" in capsys.readouterr().err


def test_cli_broken_catalog_is_a_config_error(tmp_path, capsys):
    # The user's center is fine; the catalog row is what is out of range.
    path = _catalog(tmp_path, rows=[{"id": "bad", "latitude": 123.0, "longitude": 0.0, "status": "active"}])

    code = main(["nearby", "--lat", "33.5", "--lng", "-7.6", "--catalog", str(path)])

    # This must not be reported as an invalid user argument.
    assert code == EXIT_CONFIG_ERROR
    assert "catalog" in capsys.readouterr().err


def test_cli_postgrest_backend_without_credentials(monkeypatch, capsys):
    # Select the hosted backend but provide no url/key.
    monkeypatch.setenv("NEARBYADS_STORE_BACKEND", "postgrest")
    monkeypatch.setenv("SUPABASE_URL", "")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "")

    code = main(["nearby", "--lat", "33.5", "--lng", "-7.6"])

    # A clean exit code and message instead of a traceback.
    assert code == EXIT_CONFIG_ERROR
    assert "SUPABASE_URL" in capsys.readouterr().err


def test_cli_distance(capsys):
    code = main(["distance", "--from-lat", "33.5731", "--from-lng", "-7.5898", "--to-lat", "34.0209", "--to-lng", "-6.8416"])

    assert code == 0
    assert "km away" in capsys.readouterr().out
