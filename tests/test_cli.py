"""Tests for the command-line interface."""

from __future__ import annotations

import json

from typer.testing import CliRunner

from content_store.cli import app

runner = CliRunner()


def _example_content(write_post):
    write_post("a.md", "title: Alpha\ndate: 2020-01-01\npublished: true")
    write_post("b.md", "title: Beta\ndate: 2020-02-01\npublished: false\nredirect_from: [/old-b]")
    return str(write_post.content_dir)


def test_check_reports_counts(write_post, monkeypatch):
    monkeypatch.delenv("CONTENT_STORE_PREVIEW", raising=False)
    content = _example_content(write_post)

    result = runner.invoke(app, ["check", "-d", content, "--log-level", "ERROR"])

    assert result.exit_code == 0, result.output
    assert "records=2" in result.output
    assert "published=1" in result.output
    assert "aliases=1" in result.output


def test_check_fails_on_duplicate_slug(write_post):
    write_post("a.md", "title: One\ndate: 2020-01-01")
    write_post("a/index.md", "title: Two\ndate: 2020-01-02")

    result = runner.invoke(app, ["check", "-d", str(write_post.content_dir), "--log-level", "CRITICAL"])

    assert result.exit_code == 1
    assert "Load failed" in result.output
    assert "Duplicate slug" in result.output


def test_check_fails_on_missing_directory(tmp_path):
    result = runner.invoke(app, ["check", "-d", str(tmp_path / "missing"), "--log-level", "CRITICAL"])

    assert result.exit_code == 1
    assert "Load failed" in result.output


def test_check_fails_on_undecodable_file(write_post):
    write_post("a.md", "title: A\ndate: 2020-01-01")
    (write_post.content_dir / "bad.md").write_bytes(b"---\ntitle: B\xff\ndate: 2020-01-01\n---\n")

    result = runner.invoke(app, ["check", "-d", str(write_post.content_dir), "--log-level", "CRITICAL"])

    assert result.exit_code == 1
    assert "Load failed" in result.output
    assert "bad.md" in result.output


def test_list_hides_drafts_unless_preview(write_post, monkeypatch):
    monkeypatch.delenv("CONTENT_STORE_PREVIEW", raising=False)
    content = _example_content(write_post)

    published = runner.invoke(app, ["list", "-d", content, "--log-level", "ERROR"])
    preview = runner.invoke(app, ["list", "-d", content, "--preview", "--log-level", "ERROR"])

    assert published.exit_code == 0, published.output
    assert "Alpha" in published.output
    assert "Beta" not in published.output
    assert preview.exit_code == 0, preview.output
    assert "Beta" in preview.output
    assert "draft" in preview.output


def test_resolve_alias_prints_redirect(write_post, monkeypatch):
    monkeypatch.delenv("CONTENT_STORE_PREVIEW", raising=False)
    content = _example_content(write_post)

    result = runner.invoke(app, ["resolve", "/old-b", "-d", content, "--log-level", "ERROR"])

    assert result.exit_code == 0, result.output
    assert "301" in result.output
    assert "/b/" in result.output


def test_resolve_follow_to_draft_is_not_found(write_post, monkeypatch):
    monkeypatch.delenv("CONTENT_STORE_PREVIEW", raising=False)
    content = _example_content(write_post)

    result = runner.invoke(app, ["resolve", "/old-b", "--follow", "-d", content, "--log-level", "ERROR"])

    assert result.exit_code == 2
    assert "404" in result.output
    assert "/old-b" in result.output
    assert "404 b" not in result.output


def test_resolve_follow_in_preview_via_env(write_post, monkeypatch):
    monkeypatch.setenv("CONTENT_STORE_PREVIEW", "1")
    content = _example_content(write_post)

    result = runner.invoke(app, ["resolve", "/old-b", "--follow", "-d", content, "--log-level", "ERROR"])

    assert result.exit_code == 0, result.output
    assert "200" in result.output
    assert "Beta" in result.output


def test_index_writes_json_files(write_post, tmp_path, monkeypatch):
    monkeypatch.delenv("CONTENT_STORE_PREVIEW", raising=False)
    content = _example_content(write_post)
    output = tmp_path / "site"

    result = runner.invoke(app, ["index", "-o", str(output), "-d", content, "--log-level", "ERROR"])

    assert result.exit_code == 0, result.output
    posts = json.loads((output / "posts.json").read_text(encoding="utf-8"))
    assert [post["slug"] for post in posts] == ["a"]
    assert json.loads((output / "redirects.json").read_text(encoding="utf-8")) == {}


def test_config_file_supplies_content_dir(write_post, tmp_path, monkeypatch):
    monkeypatch.delenv("CONTENT_STORE_PREVIEW", raising=False)
    content = _example_content(write_post)
    config = tmp_path / "config.yaml"
    config.write_text(f"source:\n  content_dir: '{content}'\nlogging:\n  level: ERROR\n", encoding="utf-8")

    result = runner.invoke(app, ["check", "-c", str(config)])

    assert result.exit_code == 0, result.output
    assert "records=2" in result.output


def test_invalid_config_exits_with_error(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("source:\n  bogus: 1\n", encoding="utf-8")

    result = runner.invoke(app, ["check", "-c", str(config)])

    assert result.exit_code == 1
    assert "Config error" in result.output
