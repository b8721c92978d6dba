import socket

import numpy as np
import pytest

from hybridheat.affinity import (
    compute_kernel,
    current_cores,
    format_mask,
    main,
    mask_report,
)


def test_format_mask_layout():
    line = format_mask("node", 1, 2, [0, 3])
    assert line == "node: task    1, thread  2, ccount  2, cores:  0  3 "


def test_format_mask_without_cores_counts_zero():
    line = format_mask("host", 0, 0, [])
    assert line.endswith("ccount  0, cores: ")


def test_current_cores_sorted_and_valid():
    cores = current_cores()
    assert cores
    assert cores == sorted(cores)
    assert all(core >= 0 for core in cores)


def test_mask_report_one_line_per_thread():
    lines = mask_report(2, 3)
    cores = current_cores()
    host = socket.gethostname()
    assert lines == [format_mask(host, 2, t, cores) for t in range(3)]


def test_mask_report_rejects_no_threads():
    with pytest.raises(ValueError):
        mask_report(0, 0)


def test_compute_kernel_first_values():
    out = compute_kernel(0, 5)
    assert out.shape == (5,)
    assert out[0] == 0.0
    assert out[1] == pytest.approx(12.4)


def test_compute_kernel_scales_with_rank():
    base = compute_kernel(0, 100)
    scaled = compute_kernel(3, 100)
    assert np.allclose(scaled, 2.0 * base)


def test_compute_kernel_empty_and_negative():
    assert compute_kernel(1, 0).size == 0
    with pytest.raises(ValueError):
        compute_kernel(0, -1)


def test_main_prints_time(capsys):
    assert main(["--length", "10"]) == 0
    assert capsys.readouterr().out.startswith("Time: ")


def test_main_mask(capsys):
    assert main(["--mask", "--threads", "2", "--rank", "1"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 2
    assert all("task    1" in line for line in lines)