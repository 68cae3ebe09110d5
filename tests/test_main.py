from __future__ import annotations

from pathlib import Path

from component_preview.__main__ import main, parse_args

PREVIEWS = Path(__file__).resolve().parent / "fixtures" / "previews"


def test_parse_args_collects_preview_paths():
    args = parse_args(["--preview-path", "a", "--preview-path", "b", "--port", "9000", "--list"])

    assert args.preview_paths == [Path("a"), Path("b")]
    assert args.port == 9000
    assert args.list is True
    assert args.config is None


def test_list_prints_previews_and_examples(tmp_path, capsys):
    exit_code = main(["--list", "--config", str(tmp_path / "missing.yaml"), "--preview-path", str(PREVIEWS)])

    assert exit_code == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[:3] == ["admin/icon_button", "  default", "  plain"]
    assert "button" in lines
    assert "  with_locals" in lines


def test_list_reports_empty_preview_paths(tmp_path, capsys):
    exit_code = main(["--list", "--config", str(tmp_path / "missing.yaml"), "--preview-path", str(tmp_path)])

    assert exit_code == 0
    assert capsys.readouterr().out.startswith("No previews found in ")


def test_invalid_configuration_exits_with_error(tmp_path, capsys):
    config = tmp_path / "component_preview.yaml"
    config.write_text("preview_route: 42\n", encoding="utf-8")

    exit_code = main(["--list", "--config", str(config)])

    assert exit_code == 2
    assert "ERROR" in capsys.readouterr().err
