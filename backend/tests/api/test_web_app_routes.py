"""Web App Route - SPA fallback, static files, version cookie, no path escapes."""

import pytest

from octopus.config import Settings, get_settings
from octopus.main import app


@pytest.fixture
def web_dirs(tmp_path):
    v1 = tmp_path / "build"
    v2 = tmp_path / "build-v2"
    (v1 / "static").mkdir(parents=True)
    v2.mkdir()
    (v1 / "index.html").write_text("<html>v1</html>")
    (v1 / "static" / "app.js").write_text("console.log('v1')")
    (v2 / "index.html").write_text("<html>v2</html>")
    (tmp_path / "secret.txt").write_text("do not serve")
    app.dependency_overrides[get_settings] = lambda: Settings(
        web_directory=str(v1), web_directory_v2=str(v2),
    )
    return v1, v2


async def test_client_routes_get_index(client, web_dirs):
    for path in ("/", "/claim/12", "/profile/alice"):
        res = await client.get(path)
        assert res.status_code == 200, path
        assert res.text == "<html>v1</html>"


async def test_static_file_is_served(client, web_dirs):
    res = await client.get("/static/app.js")
    assert res.status_code == 200
    assert res.text == "console.log('v1')"


async def test_missing_static_file_is_404(client, web_dirs):
    res = await client.get("/static/missing.js")
    assert res.status_code == 404


async def test_paths_cannot_escape_the_build_directory(client, web_dirs):
    res = await client.get("/..%2Fsecret.txt")
    assert res.status_code == 404


async def test_unknown_api_path_is_not_the_spa(client, web_dirs):
    res = await client.get("/api/v1/does-not-exist")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_web_version_cookie_selects_v2(client, web_dirs):
    res = await client.get("/claim/12", headers={"Cookie": "web_version=2"})
    assert res.text == "<html>v2</html>"


async def test_missing_build_is_404(client, tmp_path):
    app.dependency_overrides[get_settings] = lambda: Settings(web_directory=str(tmp_path / "none"))
    res = await client.get("/")
    assert res.status_code == 404


async def test_referrer_link_is_kept_in_a_short_lived_cookie(client, web_dirs):
    res = await client.get("/", params={"referrer": "alice"})

    assert res.status_code == 200
    referrer = [
        h for h in res.headers.get_list("set-cookie") if h.startswith("tru-referrer=")
    ]
    assert len(referrer) == 1
    assert referrer[0].startswith("tru-referrer=alice;")
    assert "Max-Age=120" in referrer[0]


async def test_plain_page_load_sets_no_referrer(client, web_dirs):
    res = await client.get("/claim/12")
    assert not any(
        h.startswith("tru-referrer=") for h in res.headers.get_list("set-cookie")
    )
