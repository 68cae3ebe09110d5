from markupsafe import Markup

from component_preview.rendering import helpers


def test_content_tag_escapes_content_and_attributes():
    html = helpers.content_tag("p", "<b>hi</b>", class_="note", title='say "hi"')

    assert html == '<p class="note" title="say &#34;hi&#34;">&lt;b&gt;hi&lt;/b&gt;</p>'
    assert isinstance(html, Markup)


def test_content_tag_keeps_markup_and_calls_blocks():
    inner = helpers.content_tag("span", "x")

    assert helpers.content_tag("div", inner) == "<div><span>x</span></div>"
    assert helpers.content_tag("div", lambda: "called") == "<div>called</div>"
    assert helpers.content_tag("div") == "<div></div>"


def test_tag_attribute_rules():
    html = helpers.tag("input", type="checkbox", checked=True, disabled=False, value=None, data={"user_id": 7})

    assert html == '<input type="checkbox" checked data-user-id="7">'
    assert helpers.tag("div", aria={"label": "Menu"}, class_=["a", "b"]) == '<div aria-label="Menu" class="a b">'


def test_asset_helpers_prefix_relative_sources():
    assert helpers.stylesheet_link_tag("style") == '<link rel="stylesheet" href="/static/style.css">'
    assert helpers.javascript_include_tag("main", defer=True) == '<script src="/static/main.js" defer></script>'
    assert helpers.javascript_include_tag("https://cdn.example.com/app.js") == (
        '<script src="https://cdn.example.com/app.js"></script>'
    )
    assert helpers.image_tag("icons/user_avatar.png") == '<img src="/static/icons/user_avatar.png" alt="User avatar">'
    assert helpers.asset_path("/assets/app.css") == "/assets/app.css"
    assert helpers.asset_path("app.css", prefix="/assets/") == "/assets/app.css"


def test_multiple_stylesheets_are_joined_by_newlines():
    html = helpers.stylesheet_link_tag("a", "b.css")

    assert html == '<link rel="stylesheet" href="/static/a.css">\n<link rel="stylesheet" href="/static/b.css">'


def test_tag_helpers_mixin_uses_asset_prefix():
    class Helpers(helpers.TagHelpers):
        asset_prefix = "/assets"

    view = Helpers()
    assert view.image_tag("logo.svg", alt="Logo") == '<img src="/assets/logo.svg" alt="Logo">'
    assert view.content_tag("em", "x") == "<em>x</em>"
