import importlib
import importlib.util
import json
import os
import sys

import pytest

# Import run.py as a module and exercise parse_args + main directly.


@pytest.fixture()
def run_module():
    # Ensure a clean import each time (run.py initialises colorama on import)
    if "run" in sys.modules:
        del sys.modules["run"]
    return importlib.import_module("run")


def test_version_flag_outputs_version(run_module, capsys):
    from delve import __version__

    with pytest.raises(SystemExit) as exc:
        run_module.parse_args(["--version"])
    assert exc.value.code == 0
    captured = capsys.readouterr().out
    assert __version__ in captured
    assert "Delve" in captured


def test_default_command_is_generate(run_module):
    ns = run_module.parse_args([])
    assert ns.command == "generate"


def test_generate_prints_map_and_summary(run_module, capsys):
    assert run_module.main(["generate", "--seed", "12345", "--no-color"]) == 0
    out = capsys.readouterr().out
    assert "@" in out
    assert "Seed:" in out and "12345" in out
    assert "\x1b[" not in out


def test_generate_json(run_module, capsys, monkeypatch):
    from delve import logging_utils

    monkeypatch.setattr(logging_utils, "CURRENT_LEVEL", logging_utils.LEVELS["error"])
    assert run_module.main(["generate", "--seed", "7", "--width", "40", "--height", "30", "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["seed"] == 7
    assert data["width"] == 40 and data["height"] == 30
    assert data["rooms"]


def test_env_seed_used_when_flag_missing(run_module, capsys, monkeypatch):
    from delve import logging_utils

    monkeypatch.setattr(logging_utils, "CURRENT_LEVEL", logging_utils.LEVELS["error"])
    monkeypatch.setenv("DELVE_SEED", "4321")
    assert run_module.main(["generate", "--json"]) == 0
    assert json.loads(capsys.readouterr().out)["seed"] == 4321


def test_invalid_size_exit_code(run_module, capsys):
    assert run_module.main(["generate", "--width", "0"]) == 2
    assert "[ERROR]" in capsys.readouterr().err


def test_check_command(run_module, capsys):
    assert run_module.main(["check", "1", "2"]) == 0
    out = capsys.readouterr().out
    assert "seed=1" in out and "seed=2" in out
    assert "FAIL" not in out


def test_diagnose_seeds_script(capsys, monkeypatch):
    from delve import logging_utils

    monkeypatch.setattr(logging_utils, "CURRENT_LEVEL", logging_utils.LEVELS["error"])
    path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "scripts", "diagnose_seeds.py")
    spec = importlib.util.spec_from_file_location("diagnose_seeds", path)
    diagnose_seeds = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(diagnose_seeds)
    assert diagnose_seeds.main(["--size", "40x40", "11", "12"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert [r["seed"] for r in payload["results"]] == [11, 12]
    assert all(r["ok"] for r in payload["results"])
