"""
Tests for scripts/render_mf2.py.

The script is run as a subprocess with src/ on PYTHONPATH, the same way it
is run from a checkout.
"""
import json
import os
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
SCRIPT = ROOT / "scripts" / "render_mf2.py"


def run_script(*args, stdin=None):
    env = dict(os.environ, PYTHONPATH=str(ROOT / "src"))
    return subprocess.run(
        [sys.executable, str(SCRIPT), *args],
        input=stdin,
        capture_output=True,
        text=True,
        cwd=ROOT,
        env=env,
    )


def test_renders_file(tmp_path):
    doc = tmp_path / "reply.json"
    doc.write_text(json.dumps({
        "type": ["h-entry"],
        "properties": {"in-reply-to": ["https://example.com/post"], "content": ["Nice!"]},
    }))

    result = run_script(str(doc), "--no-wrap")

    assert result.returncode == 0, result.stderr
    assert "Post type: reply" in result.stdout
    assert '<p class="p-content">Nice!</p>' in result.stdout
    assert '<div class="h-entry">' not in result.stdout


def test_reads_stdin():
    result = run_script("-", stdin=json.dumps({"type": ["h-entry"], "properties": {"content": ["hi"]}}))

    assert result.returncode == 0, result.stderr
    assert "Post type: note" in result.stdout


def test_invalid_json():
    result = run_script("-", stdin="{not json")
    assert result.returncode == 1
    assert "Invalid JSON" in result.stderr


def test_invalid_document():
    result = run_script("-", stdin=json.dumps({"type": ["entry"], "properties": {}}))
    assert result.returncode == 1
    assert "Invalid Micropub document" in result.stderr


def test_missing_file(tmp_path):
    result = run_script(str(tmp_path / "missing.json"))
    assert result.returncode == 1
    assert "Cannot read" in result.stderr
    assert "Traceback" not in result.stderr


def test_no_wrap_with_empty_micropub_section(tmp_path):
    config = tmp_path / "config.yml"
    config.write_text("micropub:\n")

    result = run_script(
        "-", "--config", str(config), "--no-wrap",
        stdin=json.dumps({"type": ["h-entry"], "properties": {"content": ["hi"]}}),
    )

    assert result.returncode == 0, result.stderr
    assert "Template: basic-page" in result.stdout
    assert '<div class="h-entry">' not in result.stdout
