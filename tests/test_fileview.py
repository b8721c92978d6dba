import numpy as np
import pytest

from hybridheat.fileview import (
    DIMS,
    ITEMSIZE,
    assemble,
    cart_coords,
    local_block,
    main,
    row_offsets,
    write_rows,
    write_with_view,
)


def test_cart_coords_cover_grid_once():
    coords = [cart_coords(rank, DIMS) for rank in range(4)]
    assert sorted(coords) == [(a, b) for a in range(2) for b in range(2)]
    assert coords[0] == (0, 0)


def test_cart_coords_out_of_range():
    with pytest.raises(ValueError):
        cart_coords(4, DIMS)


def test_local_block_upper_byte_marks_rank():
    for rank in range(4):
        block = local_block(rank, cart_coords(rank, DIMS), 4)
        assert block.shape == (4, 4)
        assert np.all((block >> 8) == 0x0A + rank)


def test_row_offsets_step_by_full_row():
    offsets = row_offsets((1, 1), 4, 8)
    steps = {b - a for a, b in zip(offsets, offsets[1:])}
    assert steps == {8 * ITEMSIZE}
    assert len(offsets) == 4


def test_row_offsets_origin_block_starts_at_zero():
    assert row_offsets((0, 0), 4, 8)[0] == 0


def test_assemble_matches_documented_dump():
    full = assemble(4, 4)
    assert full.shape == (8, 8)
    assert full[0, 1] == 0x0A08
    assert full[0, 4] == 0x0B20
    assert full[4, 0] == 0x0C04


def test_assemble_low_byte_is_column_major_index():
    full = assemble(4, 4)
    rows, cols = np.indices(full.shape)
    assert np.array_equal(full & 0xFF, rows + 8 * cols)


def test_wrong_task_count_rejected(tmp_path):
    with pytest.raises(ValueError, match="4 MPI tasks"):
        write_rows(tmp_path / "out.dat", 3, 4)
    with pytest.raises(ValueError):
        assemble(2, 4)


def test_write_rows_matches_assembled(tmp_path):
    path = write_rows(tmp_path / "output.dat", 4, 4)
    assert path.read_bytes() == assemble(4, 4).tobytes()


def test_write_with_view_matches_write_rows(tmp_path):
    rows = write_rows(tmp_path / "rows.dat", 4, 3)
    view = write_with_view(tmp_path / "view.dat", 4, 3)
    assert rows.read_bytes() == view.read_bytes()
    assert len(view.read_bytes()) == 6 * 6 * ITEMSIZE


def test_existing_file_not_truncated(tmp_path):
    target = tmp_path / "output.dat"
    expected = assemble(4, 4).tobytes()
    target.write_bytes(b"\xff" * (len(expected) + 5))
    write_with_view(target, 4, 4)
    data = target.read_bytes()
    assert data[: len(expected)] == expected
    assert data[len(expected):] == b"\xff" * 5


def test_main_writes_file(tmp_path):
    target = tmp_path / "cli.dat"
    assert main([str(target), "--view"]) == 0
    assert target.read_bytes() == assemble(4, 4).tobytes()


def test_main_reports_bad_task_count(tmp_path, capsys):
    assert main([str(tmp_path / "x.dat"), "--tasks", "2"]) == 1
    assert "4 MPI tasks" in capsys.readouterr().out