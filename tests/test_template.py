from __future__ import annotations

import pytest

from rapid_dev.template import TemplateRenderer, TemplateRenderingError


@pytest.fixture()
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


def test_render_string_with_json_filter(renderer: TemplateRenderer):
    template = '"name": {{ package|json }}, "repo": "{{ repo }}"'
    context = {"package": "my-shop-api", "repo": "my-shop"}
    rendered = renderer.render_string(template, context)
    assert rendered == '"name": "my-shop-api", "repo": "my-shop"'


def test_render_string_leaves_single_braces_alone(renderer: TemplateRenderer):
    template = "run(`deploy ${service}`, { cwd }); {{ region }}"
    assert renderer.render_string(template, {"region": "us-east1"}) == "run(`deploy ${service}`, { cwd }); us-east1"


def test_render_string_missing_policy_keep(renderer: TemplateRenderer):
    template = "Hello {{ missing }}"
    assert renderer.render_string(template, {}, missing="keep") == template


def test_render_string_missing_policy_empty(renderer: TemplateRenderer):
    assert renderer.render_string("Hello {{ missing }}", {}, missing="empty") == "Hello "


def test_render_string_missing_policy_error(renderer: TemplateRenderer):
    with pytest.raises(TemplateRenderingError):
        renderer.render_string("{{ missing }}", {}, missing="error")


def test_render_string_rejects_unknown_policy(renderer: TemplateRenderer):
    with pytest.raises(ValueError):
        renderer.render_string("", {}, missing="ignore")


def test_unknown_filter_raises(renderer: TemplateRenderer):
    with pytest.raises(TemplateRenderingError):
        renderer.render_string("{{ name|unknown }}", {"name": "demo"})


def test_registered_filters_chain_with_json():
    renderer = TemplateRenderer(filters={"shout": lambda value: f"{value}!"})
    assert renderer.render_string("{{ name|shout|json }}", {"name": "hi"}) == '"hi!"'
