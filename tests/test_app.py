import json

from PIL import Image

from accordion_tiler.app import build_parser, main, resolve_config
from accordion_tiler.models import (
    DEFAULT_PARAMETERS,
    EditorParameters,
    RemainderPolicy,
    TilerConfig,
)


def _run(tmp_path, *args):
    return main([*args, "--config", str(tmp_path / "config.json")])


def test_cli_writes_tiled_output(tmp_path, gradient_png, capsys):
    output = tmp_path / "out.png"
    code = _run(
        tmp_path,
        str(gradient_png),
        "-o",
        str(output),
        "--scale",
        "2",
        "--splits",
        "4",
        "--repeat",
        "3",
    )
    assert code == 0
    with Image.open(output) as img:
        assert img.size == (150, 200)
    assert "Saved 150x200" in capsys.readouterr().out


def test_cli_clamps_bad_parameters(tmp_path, gradient_png):
    output = tmp_path / "out.png"
    code = _run(
        tmp_path, str(gradient_png), "-o", str(output), "--preset", "preview",
        "--scale", "-4", "--splits", "abc", "--repeat", "0",
    )
    assert code == 0
    with Image.open(output) as img:
        assert img.size == (100, 50)


def test_cli_reports_invalid_geometry(tmp_path, gradient_png, capsys):
    code = _run(
        tmp_path, str(gradient_png), "-o", str(tmp_path / "out.png"),
        "--scale", "1", "--splits", "500",
    )
    assert code == 2
    assert "Error:" in capsys.readouterr().err
    assert not (tmp_path / "out.png").exists()


def test_cli_reports_decode_failure(tmp_path, capsys):
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"nope")
    assert _run(tmp_path, str(bad), "-o", str(tmp_path / "out.png")) == 2
    assert "Failed to load image" in capsys.readouterr().err


def test_cli_requires_path_when_options_given(tmp_path, capsys):
    assert _run(tmp_path, "--scale", "2") == 2
    assert "Missing image path" in capsys.readouterr().err


def test_cli_saves_effective_config(tmp_path, gradient_png):
    code = _run(
        tmp_path, str(gradient_png), "-o", str(tmp_path / "out.png"),
        "--scale", "1.5", "--splits", "3", "--remainder", "extend-last",
        "--save-config",
    )
    assert code == 0
    data = json.loads((tmp_path / "config.json").read_text())
    assert data["parameters"] == {"scale": 1.5, "num_splits": 3, "horizontal_repeat": 1}
    assert data["remainder_policy"] == "extend-last"


def test_resolve_config_prefers_arguments_over_stored_values():
    args = build_parser().parse_args(["in.png", "--splits", "7", "--workers", "0"])
    stored = TilerConfig(parameters=EditorParameters(3, 2, 5))
    resolved = resolve_config(args, stored)
    assert resolved.parameters == EditorParameters(3, 7, 5)
    assert resolved.max_workers == 1
    # Stored config is left untouched
    assert stored.parameters == EditorParameters(3, 2, 5)


def test_resolve_config_defaults():
    args = build_parser().parse_args(["in.png", "--remainder", "discard"])
    resolved = resolve_config(args, TilerConfig())
    assert resolved.parameters == DEFAULT_PARAMETERS
    assert resolved.remainder_policy == RemainderPolicy.DISCARD
