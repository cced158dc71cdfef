import numpy as np
import pytest
from loguru import logger as loguru_logger

from idfexp import cli
from idfexp.settings import Extent, QuietMode


@pytest.fixture
def script(model_dir):
    path = model_dir / "run.ini"
    path.write_text("a = ramp.idf * 2\n")
    return path


def parse(*argv):
    return cli.build_parser().parse_args([str(arg) for arg in argv])


def test_settings_defaults(script, tmp_path):
    settings = cli.settings_from_args(parse(script, tmp_path / "output"))
    assert settings.base_path == script.resolve().parent
    assert settings.output_path == tmp_path / "output"
    assert settings.quiet_mode == QuietMode.OFF
    assert not settings.nodata_as_value
    assert settings.extent is None
    assert settings.decimal_count is None


def test_settings_empty_output_path(script):
    settings = cli.settings_from_args(parse(script, ""))
    assert settings.output_path == script.resolve().parent


def test_settings_options(script, tmp_path):
    args = parse(script, tmp_path, "-e", "0,0,2,3", "-d", "-i", "-m", "-r", "2", "-q", "skip")
    settings = cli.settings_from_args(args)
    assert settings.extent == Extent(0.0, 0.0, 2.0, 3.0)
    assert settings.debug
    assert settings.write_intermediate_results
    assert settings.add_metadata
    assert settings.decimal_count == 2
    assert settings.quiet_mode == QuietMode.SILENT_SKIP


def test_settings_quiet_without_value(script, tmp_path):
    settings = cli.settings_from_args(parse(script, tmp_path, "-q"))
    assert settings.quiet_mode == QuietMode.SILENT_EXIT


def test_settings_nodata_value(script, tmp_path):
    settings = cli.settings_from_args(parse(script, tmp_path, "-v"))
    assert settings.nodata_as_value
    assert np.isnan(settings.nodata_value)
    settings = cli.settings_from_args(parse(script, tmp_path, "-v", "0"))
    assert settings.nodata_value == 0.0


def test_settings_extent_of_idf(script, tmp_path):
    settings = cli.settings_from_args(parse(script, tmp_path, "-e", "ramp.idf"))
    assert settings.extent == Extent(0.0, 0.0, 4.0, 3.0)


def test_settings_missing_script(tmp_path):
    with pytest.raises(ValueError, match="Script file not found"):
        cli.settings_from_args(parse(tmp_path / "missing.ini", tmp_path))


def test_main(script, tmp_path):
    output = tmp_path / "output"
    assert cli.main([str(script), str(output), "--logger", "null"]) == 0
    assert (output / "a.IDF").is_file()


def test_main_missing_script(tmp_path):
    assert cli.main([str(tmp_path / "missing.ini"), str(tmp_path), "--logger", "null"]) == 1


def test_main_script_error(model_dir, tmp_path):
    path = model_dir / "error.ini"
    path.write_text("a = missing.idf\n")
    assert cli.main([str(path), str(tmp_path), "--logger", "null"]) == 1


def test_main_quiet_stop(model_dir, tmp_path):
    path = model_dir / "quiet.ini"
    path.write_text("a = missing.idf\nb = ramp.idf * 2\n")
    assert cli.main([str(path), str(tmp_path), "-q", "--logger", "null"]) == 0
    assert not (tmp_path / "b.IDF").exists()


def test_main_logs_error(model_dir, tmp_path, capsys):
    path = model_dir / "error.ini"
    path.write_text("a = 1\nb = missing.idf\n")
    assert cli.main([str(path), str(tmp_path), "--logger", "loguru"]) == 1
    captured = capsys.readouterr()
    assert "Error in line 2" in captured.out + captured.err


def test_main_log_file(script, tmp_path):
    log_file = tmp_path / "idfexp_run.log"
    argv = [str(script), str(tmp_path / "output"), "--logger", "loguru", "--log-file", str(log_file)]
    assert cli.main(argv) == 0
    loguru_logger.remove()
    content = log_file.read_text(encoding="utf-8")
    assert "Evaluating expression at line 1: 'a = ramp.idf * 2'" in content
    assert "  Expression result has been written to: a.IDF" in content
