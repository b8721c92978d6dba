import numpy as np
import pytest

from hybridheat.field import DecompositionError, generate_field, parallel_setup
from hybridheat.io import gather_field
from hybridheat.solver import Config, initialize, main, parse_args, run


def test_parse_args_defaults():
    config = parse_args([])
    assert (config.rows, config.cols, config.nsteps) == (2000, 2000, 500)
    assert config.input_file is None


def test_parse_args_input_file():
    config = parse_args(["in.dat"])
    assert config.input_file == "in.dat"
    assert config.nsteps == 500


def test_parse_args_input_file_and_steps():
    config = parse_args(["in.dat", "7"])
    assert (config.input_file, config.nsteps) == ("in.dat", 7)


def test_parse_args_dimensions():
    config = parse_args(["8", "6", "3"])
    assert (config.rows, config.cols, config.nsteps) == (8, 6, 3)
    assert config.input_file is None


def test_parse_args_non_numeric_is_zero():
    assert parse_args(["abc", "6", "3"]).rows == 0


def test_parse_args_too_many():
    with pytest.raises(ValueError):
        parse_args(["1", "2", "3", "4"])


def test_initialize_previous_matches_current():
    current, previous, parallels = initialize(Config(rows=8, cols=6), 2)
    assert len(parallels) == 2
    for curr, prev in zip(current, previous):
        np.testing.assert_array_equal(curr.data, prev.data)
        assert curr.data is not prev.data


def test_initialize_indivisible():
    with pytest.raises(DecompositionError):
        initialize(Config(rows=10, cols=6), 3)


def test_run_zero_steps_returns_initial_field():
    config = Config(rows=12, cols=10, nsteps=0)
    result = run(config, 2)
    expected = gather_field(
        [generate_field(12, 10, parallel_setup(r, 2, 12, 10)) for r in range(2)]
    )
    np.testing.assert_array_equal(result.field, expected)


def test_run_independent_of_task_count():
    config = Config(rows=12, cols=10, nsteps=5)
    single = run(config, 1)
    split = run(config, 3)
    np.testing.assert_allclose(split.field, single.field)
    assert split.reference == pytest.approx(single.reference)


def test_run_reference_is_interior_point():
    result = run(Config(rows=12, cols=12, nsteps=3), 2)
    assert result.reference == result.field[4, 4]
    assert result.nsteps == 3


def test_run_uniform_input_stays_uniform(tmp_path):
    path = tmp_path / "uniform.dat"
    rows = "\n".join(" ".join(["3.5"] * 5) for _ in range(6))
    path.write_text(f"# 6 5\n{rows}\n", encoding="ascii")
    result = run(Config(input_file=str(path), nsteps=4), 2)
    np.testing.assert_allclose(result.field, np.full((6, 5), 3.5))


def test_run_snapshots_at_interval():
    config = Config(rows=8, cols=8, nsteps=4, image_interval=2, snapshots=True)
    result = run(config, 2)
    assert sorted(result.snapshots) == [0, 2, 4]
    np.testing.assert_array_equal(result.snapshots[4], result.field)


def test_main_prints_summary(capsys):
    assert main(["12", "12", "2"]) == 0
    out = capsys.readouterr().out
    assert "Iteration took" in out
    assert "Reference value at 5,5:" in out


def test_main_rejects_bad_argument_count(capsys):
    assert main(["1", "2", "3", "4"]) != 0
    assert "Unsupported number of command line arguments" in capsys.readouterr().out


def test_main_reports_bad_input_file(tmp_path, capsys):
    path = tmp_path / "bad.dat"
    path.write_text("not a header\n", encoding="ascii")
    assert main([str(path)]) == 1
    assert "Error while reading the input file!" in capsys.readouterr().err