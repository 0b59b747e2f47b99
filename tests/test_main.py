import json

import numpy as np
import pytest

from main import main


def _write_config(tmp_path, **overrides):
    config = {
        'logging': {'level': 'DEBUG', 'log_file': str(tmp_path / "logs" / "sim.log")},
        'simulation_parameters': {'seed': 8, 'particle_count': 12},
        'run_control': {'max_steps': 50, 'log_throttle_steps': 10, 'headless': True},
    }
    for section, values in overrides.items():
        config[section].update(values)
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config))
    return str(path)


def test_headless_run_reaches_max_steps(tmp_path):
    sim = main(_write_config(tmp_path))
    assert sim.step_count == 50
    assert len(sim.particles) == 12
    assert sim.max_containment_error() < 1e-9
    log_text = (tmp_path / "logs" / "sim.log").read_text()
    assert "Reached max_steps (50)" in log_text
    assert "Kinetic energy" in log_text


def test_headless_run_with_profile(tmp_path):
    sim = main(_write_config(tmp_path, run_control={'profile': True, 'max_steps': 5}))
    assert sim.step_count == 5
    assert "Performance Profile" in (tmp_path / "logs" / "sim.log").read_text()


def test_runs_are_reproducible(tmp_path):
    a = main(_write_config(tmp_path))
    b = main(_write_config(tmp_path))
    np.testing.assert_array_equal(a.particles.positions, b.particles.positions)


def test_missing_config_prints_fatal(tmp_path, capsys):
    assert main(str(tmp_path / "missing.json")) is None
    assert "FATAL" in capsys.readouterr().out


def test_bad_geometry_stops_startup(tmp_path):
    path = _write_config(tmp_path, simulation_parameters={'particle_radius': 250})
    with pytest.raises(ValueError, match="Configuration error"):
        main(path)


def test_headless_needs_a_step_limit(tmp_path):
    path = _write_config(tmp_path, run_control={'max_steps': 0})
    with pytest.raises(ValueError, match="positive max_steps"):
        main(path)
