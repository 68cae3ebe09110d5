from __future__ import annotations

import inspect
from pathlib import Path

from fastapi.testclient import TestClient

from component_preview.api.previews import api_router, router
from component_preview.app import ServerConfig, create_app

PREVIEWS = Path(__file__).resolve().parent / "fixtures" / "previews"


def _create_client(tmp_path: Path, config_text: str = "") -> TestClient:
    config_path = tmp_path / "component_preview.yaml"
    if config_text:
        config_path.write_text(config_text, encoding="utf-8")
    config = ServerConfig(config_path=config_path, preview_paths=[PREVIEWS])
    return TestClient(create_app(config))


def test_root_redirects_to_preview_index(tmp_path):
    client = _create_client(tmp_path)

    response = client.get("/", follow_redirects=False)

    assert response.status_code in (302, 307)
    assert response.headers["location"] == "/previews"


def test_index_lists_previews_and_examples(tmp_path):
    client = _create_client(tmp_path)

    response = client.get("/previews")

    assert response.status_code == 200
    html = response.text
    assert '<link rel="stylesheet" href="/static/component_preview.css">' in html
    assert '<a href="/previews/admin/icon_button">admin/icon_button</a>' in html
    assert '<a href="/previews/button/with_label">with_label</a>' in html


def test_static_assets_are_served(tmp_path):
    client = _create_client(tmp_path)

    response = client.get("/static/component_preview.css")

    assert response.status_code == 200
    assert "component-preview-index" in response.text


def test_preview_page_lists_examples(tmp_path):
    client = _create_client(tmp_path)

    response = client.get("/previews/admin/icon_button")

    assert response.status_code == 200
    assert '<a href="/previews/admin/icon_button/plain">plain</a>' in response.text
    assert '<a href="/previews">All previews</a>' in response.text


def test_example_is_rendered_with_query_params(tmp_path):
    client = _create_client(tmp_path)

    response = client.get("/previews/button/with_label", params={"label": "Ship it", "ignored": "1"})

    assert response.status_code == 200
    assert '<button class="btn btn-primary">Ship it</button>' in response.text


def test_namespaced_example_uses_preview_layout(tmp_path):
    client = _create_client(tmp_path)

    response = client.get("/previews/admin/icon_button/default")

    assert response.status_code == 200
    assert response.text == '<div class="admin-layout" data-example="default"><i class="icon-star"></i></div>'


def test_unknown_preview_and_example_return_404(tmp_path):
    client = _create_client(tmp_path)

    assert client.get("/previews/unknown").status_code == 404
    assert client.get("/previews/unknown/default").status_code == 404

    response = client.get("/previews/button/nope")
    assert response.status_code == 404
    assert "nope" in response.json()["detail"]


def test_missing_template_returns_500_with_hint(tmp_path):
    client = _create_client(tmp_path)

    response = client.get("/previews/button/missing")

    assert response.status_code == 500
    assert response.json()["detail"].startswith("A preview template for example missing doesn't exist.")


def test_api_lists_previews(tmp_path):
    client = _create_client(tmp_path)

    response = client.get("/api/previews")

    assert response.status_code == 200
    previews = {item["name"]: item for item in response.json()["previews"]}
    assert sorted(previews) == ["admin/icon_button", "button", "no_layout"]
    assert previews["admin/icon_button"]["examples"] == ["default", "plain"]
    assert previews["admin/icon_button"]["layout"] == "layouts/admin"
    assert previews["no_layout"]["layout"] is False
    assert previews["button"]["layout"] is None


def test_api_returns_example_source(tmp_path):
    client = _create_client(tmp_path)

    response = client.get("/api/previews/admin/icon_button/examples/default/source")

    assert response.status_code == 200
    payload = response.json()
    assert payload["preview"] == "admin/icon_button"
    assert payload["source"].startswith("return self.render_with_template(")

    assert client.get("/api/previews/admin/icon_button/examples/nope/source").status_code == 404
    assert client.get("/api/previews/unknown/examples/default/source").status_code == 404


def test_api_exposes_resolved_configuration(tmp_path):
    client = _create_client(tmp_path)

    response = client.get("/api/config")

    assert response.status_code == 200
    assert response.json()["config"]["preview_paths"] == [str(PREVIEWS.resolve())]


def test_previews_can_be_disabled(tmp_path):
    client = _create_client(tmp_path, "show_previews: false\n")

    assert client.get("/previews").status_code == 404
    assert client.get("/previews/button/default").status_code == 404
    assert client.get("/api/previews").status_code == 404


def test_custom_preview_route(tmp_path):
    client = _create_client(tmp_path, "preview_route: /ui/components\n")

    assert client.get("/ui/components/button/default").status_code == 200
    assert client.get("/previews").status_code == 404


def test_config_preview_paths_resolve_against_config_file(tmp_path):
    (tmp_path / "previews" / "card_preview").mkdir(parents=True)
    (tmp_path / "previews" / "card_preview" / "default.html.j2").write_text("<div class=\"card\"></div>", encoding="utf-8")
    (tmp_path / "previews" / "card_preview.py").write_text(
        "from component_preview import Preview\n\n\nclass CardPreview(Preview):\n    def default(self):\n        pass\n",
        encoding="utf-8",
    )
    config_path = tmp_path / "component_preview.yaml"
    config_path.write_text("preview_paths: [previews]\n", encoding="utf-8")
    client = TestClient(create_app(ServerConfig(config_path=config_path)))

    response = client.get("/previews/card/default")

    assert response.status_code == 200
    assert '<div class="card"></div>' in response.text


def test_set_preview_config_switches_preview_paths(tmp_path):
    client = _create_client(tmp_path)
    state = client.app.state.component_preview
    assert client.get("/previews/button/default").status_code == 200

    other = tmp_path / "other"
    other.mkdir()
    state.set_preview_config(state.preview_config.model_copy(update={"preview_paths": [other]}))

    assert client.get("/previews/button/default").status_code == 404
    assert client.get("/api/previews").json() == {"previews": []}


def test_preview_routes_run_in_the_threadpool():
    # Preview loading imports files and takes a lock; it must not block the event loop.
    endpoints = [route.endpoint for route in [*router.routes, *api_router.routes]]

    assert endpoints
    assert not any(inspect.iscoroutinefunction(endpoint) for endpoint in endpoints)
