from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from sitepilot import site as site_mod
from sitepilot.runner import StepFailure
from sitepilot.settings import SiteSettings
from sitepilot.site import MdocStep, RenderStep, build_site_task, site_task, substitute
from sitepilot.theme import build_theme


def test_task_runs_render_on_evaluated_output(tmp_path):
    calls = []
    evaluated = tmp_path / "mdoc"

    def evaluate():
        calls.append("evaluate")
        evaluated.mkdir()
        (evaluated / "index.md").write_text("done")
        return evaluated

    def render(docs_dir):
        # render must see the fully materialized evaluation output
        calls.append(("render", docs_dir, (docs_dir / "index.md").read_text()))
        return tmp_path / "site"

    out = build_site_task(evaluate, render)()

    assert out == tmp_path / "site"
    assert calls == ["evaluate", ("render", evaluated, "done")]


def test_evaluate_failure_aborts_before_render():
    failure = StepFailure(step="evaluate docs", cmd="mdoc", exit_code=2)
    rendered = []

    def evaluate():
        raise failure

    task = build_site_task(evaluate, rendered.append)
    with pytest.raises(StepFailure) as exc:
        task()
    assert exc.value is failure
    assert rendered == []


def test_render_failure_propagates(tmp_path):
    def render(_):
        raise RuntimeError("renderer crashed")

    with pytest.raises(RuntimeError, match="renderer crashed"):
        build_site_task(lambda: tmp_path, render)()


def test_substitute_leaves_unknown_tokens():
    text = "use @VERSION@ not @UNKNOWN@ or user@example.org"
    assert substitute(text, {"VERSION": "1.5.0"}) == "use 1.5.0 not @UNKNOWN@ or user@example.org"


def test_mdoc_step_copies_and_substitutes(tmp_path):
    src = tmp_path / "docs"
    (src / "guide").mkdir(parents=True)
    (src / "index.md").write_text("version @VERSION@")
    (src / "guide" / "setup.md").write_text("snapshot @SNAPSHOT_VERSION@")
    (src / "raw.txt").write_text("@VERSION@")
    out = tmp_path / "target" / "mdoc"
    out.mkdir(parents=True)
    (out / "stale.md").write_text("old")

    step = MdocStep(src, out, {"VERSION": "1.5.0", "SNAPSHOT_VERSION": "1.6.0-SNAPSHOT"})

    assert step() == out
    assert (out / "index.md").read_text() == "version 1.5.0"
    assert (out / "guide" / "setup.md").read_text() == "snapshot 1.6.0-SNAPSHOT"
    assert (out / "raw.txt").read_text() == "@VERSION@"
    assert not (out / "stale.md").exists()
    # sources are untouched
    assert (src / "index.md").read_text() == "version @VERSION@"


def test_mdoc_step_runs_evaluator(tmp_path, monkeypatch):
    src = tmp_path / "docs"
    src.mkdir()
    (src / "index.md").write_text("hi")
    out = tmp_path / "mdoc"
    seen = []
    monkeypatch.setattr(site_mod, "run_command", lambda name, argv, cwd: seen.append((name, argv, cwd)))

    MdocStep(src, out, command=("phmdoctest", "{out}"), cwd=tmp_path)()

    assert seen == [("evaluate docs", ["phmdoctest", str(out)], tmp_path)]


def test_mdoc_step_requires_sources(tmp_path):
    with pytest.raises(FileNotFoundError):
        MdocStep(tmp_path / "nope", tmp_path / "out")()


def test_render_step_writes_config_and_assets(tmp_path, monkeypatch):
    docs = tmp_path / "mdoc"
    docs.mkdir()
    seen = []
    monkeypatch.setattr(site_mod, "run_command", lambda name, argv, cwd: seen.append(argv))

    settings = SiteSettings(site_name="demo", api_url="https://example.org/api/")
    theme = build_theme(settings, "data:image/svg+xml;base64,AAAA")
    config_path = tmp_path / "target" / "mkdocs.yml"
    step = RenderStep(
        theme=theme,
        site_dir=tmp_path / "site",
        config_path=config_path,
        command=("mkdocs", "build", "--config-file", "{config}"),
        cwd=tmp_path,
    )

    assert step(docs) == tmp_path / "site"
    assert seen == [["mkdocs", "build", "--config-file", str(config_path)]]
    assert (docs / "images" / "favicon.png").read_bytes().startswith(b"\x89PNG")
    assert "860px" in (docs / "stylesheets" / "sitepilot.css").read_text()

    config = yaml.safe_load(config_path.read_text())
    assert config["site_name"] == "demo"
    assert config["docs_dir"] == str(docs.resolve())
    assert config["theme"]["logo"] == "data:image/svg+xml;base64,AAAA"
    assert config["theme"]["favicon"] == "images/favicon.png"
    assert config["extra"]["social"][0]["link"] == "https://example.org/api/"


def test_site_task_resolves_paths_against_root(tmp_path, monkeypatch):
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "index.md").write_text("@VERSION@")
    monkeypatch.setattr(site_mod, "run_command", lambda name, argv, cwd: None)

    settings = SiteSettings()
    theme = build_theme(settings, "data:,")
    out = site_task(settings, theme, {"VERSION": "1.0.0"}, root=tmp_path)()

    assert out == tmp_path / "target" / "docs" / "site"
    assert (tmp_path / "target" / "mdoc" / "index.md").read_text() == "1.0.0"
    assert (tmp_path / "target" / "docs" / "mkdocs.yml").exists()


@pytest.mark.parametrize("out", ["docs", "docs/_out", "."])
def test_mdoc_step_refuses_overlapping_output(tmp_path, out):
    src = tmp_path / "docs"
    src.mkdir()
    (src / "index.md").write_text("keep me")

    with pytest.raises(ValueError, match="overlaps"):
        MdocStep(src, tmp_path / out)()

    assert (src / "index.md").read_text() == "keep me"


def test_mdoc_step_refuses_output_inside_root_sources(tmp_path):
    (tmp_path / "index.md").write_text("keep me")

    with pytest.raises(ValueError):
        MdocStep(tmp_path, tmp_path / "target" / "mdoc")()

    assert not (tmp_path / "target").exists()
