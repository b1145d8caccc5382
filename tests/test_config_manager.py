import json

from accordion_tiler.config_manager import ConfigManager
from accordion_tiler.models import (
    EditorParameters,
    RemainderPolicy,
    ResampleMethod,
    TilerConfig,
)


def test_missing_file_gives_defaults(tmp_path):
    config = ConfigManager(tmp_path / "absent.json").load()
    assert config == TilerConfig()


def test_save_then_load(tmp_path):
    manager = ConfigManager(tmp_path / "config.json")
    config = TilerConfig(
        parameters=EditorParameters(scale=2.5, num_splits=4, horizontal_repeat=3),
        remainder_policy=RemainderPolicy.EXTEND_LAST,
        resample=ResampleMethod.LANCZOS,
        output_format="WEBP",
        output_filename="tiles.webp",
        max_workers=2,
        parallel_threshold=8,
    )
    ok, error = manager.save(config)
    assert ok and error is None
    assert manager.load() == config


def test_loaded_values_are_clamped(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "parameters": {"scale": -2, "num_splits": "many", "horizontal_repeat": 2.7},
                "remainder_policy": "redistribute",
                "resample": "sinc",
                "max_workers": 0,
            }
        )
    )
    config = ConfigManager(path).load()
    assert config.parameters == EditorParameters(1, 1, 2)
    assert config.remainder_policy == RemainderPolicy.DISCARD
    assert config.resample == ResampleMethod.BILINEAR
    assert config.max_workers is None


def test_malformed_file_warns_and_uses_defaults(tmp_path, capsys):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    config = ConfigManager(path).load()
    assert config == TilerConfig()
    assert "Warning" in capsys.readouterr().out


def test_save_reports_errors(tmp_path):
    manager = ConfigManager(tmp_path / "missing-dir" / "config.json")
    ok, error = manager.save(TilerConfig())
    assert not ok
    assert error
