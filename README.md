# hybridheat

A solver for the two-dimensional heat equation on a rectangular grid. It uses
an explicit five-point stencil and fixed boundary conditions. The grid is split
into horizontal strips, one per task. Each strip has ghost layers. Before every
step a halo exchange fills them from the neighbouring strips. The strips are
gathered back into one array whenever output is needed.

The package also has a few small demos from parallel programming:

- writing a 2×2 decomposed array of 16-bit values to one binary file, either
  row by row at computed offsets or through a subarray file view;
- reporting which CPU cores the current process may run on, and timing a
  simple numerical kernel;
- hybrid "hello world" output, thread-support level reports, and messages
  passed between the threads of several tasks.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## The heat solver

```
hybridheat                       # default 2000 x 2000 grid, 500 steps
hybridheat input.dat             # initial field read from a file, 500 steps
hybridheat input.dat 1000        # initial field from a file, 1000 steps
hybridheat 400 400 1000          # 400 rows, 400 columns, 1000 steps
```

Any other number of arguments prints an error and exits with status 1. Numeric
arguments are read from their leading digits, and text without digits counts as 0.
The command runs the whole grid as a single strip and prints the time the
iteration took and the value at grid point (5, 5) of the final field.

A generated initial field is a cold disc (5.0) on a warm background (65.0).
The disc sits near the centre of the grid and its radius is one sixth of the
row count. The left ghost column is held at 20.0 and the right at 70.0. The top
ghost row of the first strip is 85.0. When there is more than one strip, the
bottom ghost row of the last strip is 5.0.

An input file begins with a header line `# <rows> <cols>`. After it come
`rows × cols` numbers in row-major order, separated by whitespace. The ghost
layers are filled by copying the neighbouring interior values. A malformed
header, too few values, or a value that is not a number raises
`InputFormatError`. The row count must divide evenly among the strips, or
`DecompositionError` is raised.

The time step is the largest stable one for the grid spacing
(`dx = dy = 0.01`) and the diffusion constant (`a = 0.5` by default).

From Python:

```python
from hybridheat.solver import Config, parse_args, run

config = parse_args(["200", "200", "100"])
result = run(config, 4)            # four strips
result.field                       # final global array (rows x cols)
result.reference                   # value at (5, 5) of the first strip

config = Config(rows=120, cols=120, nsteps=1000, snapshots=True, image_interval=250)
run(config).snapshots              # {0: ..., 250: ..., 500: ..., 750: ..., 1000: ...}
```

`Config` holds `rows`, `cols`, `nsteps`, `input_file`, `a`, `image_interval`
and `snapshots`. `run` returns a `Result` with `field`, `reference`,
`elapsed`, `nsteps` and `snapshots`. `initialize(config, size)` returns the
current and previous fields and the `ParallelData` of every strip.

The building blocks can also be used on their own:

```python
from hybridheat.field import Field, ParallelData, generate_field, parallel_setup
from hybridheat.core import evolve, exchange, stable_time_step
from hybridheat.io import gather_field, read_field, read_header
```

- `parallel_setup(rank, size, nx, ny)` works out a strip's neighbours
  (`nup`, `ndown`, or `None` at an edge). It raises `DecompositionError` if
  `nx` does not divide evenly.
- `generate_field`, `allocate_field` and `set_field_dimensions` create a
  strip's `Field`. `Field.data` includes the ghost layers,
  `Field.inner()` is a view without them, and `Field.copy()` and
  `Field.copy_from()` duplicate values.
- `exchange(fields, parallels)` fills the ghost rows of a list of strips.
- `evolve(curr, prev, a, dt)` advances one step into `curr`.
- `gather_field(fields)` joins the strip interiors into one array.

### What the solver does not do

The solver writes no image files. Snapshots of the field are kept in memory
(`Result.snapshots`) for you to save or plot yourself. All strips run one
after another in one process. The decomposition shapes the data, not the
execution: nothing runs across several processes or machines.

## Demos

```
hybridheat-fileview [output] [--view] [--tasks N] [--localsize N]
hybridheat-affinity [--mask] [--threads N] [--rank R] [--length N]
hybridheat-hello [--rank R] [--threads N] [--provided LEVEL] [--tasks N]
```

`hybridheat-fileview` writes the decomposed array of four 4×4 blocks (8×8 in
total). By default it writes to `output.dat`, one row at a time. With `--view`
it writes to `output_fileview.dat` through a subarray file view. Both
strategies (`write_rows` and `write_with_view` in `hybridheat.fileview`)
produce identical files. Any task count other than 4 is refused. For the
default size, the low byte of each value is its index in the full array. The
high byte marks the block that wrote it: `0x0A` for block 0, `0x0B` for
block 1, and so on. `assemble` returns the same array in memory.

`hybridheat-affinity` times `compute_kernel` over ten million points by
default and prints `Time: ...`. With `--mask` it prints one line per thread
instead, giving the host name, task, thread, core count and the cores that
`current_cores()` reports.

`hybridheat-hello` prints one greeting per thread. For rank 0 it then prints
the provided thread-support level and the list of `ThreadLevel` values. With
`--tasks N` it instead sends each master thread's id to the matching thread of
every other task and prints what each one received. This needs
`--provided 3` (`ThreadLevel.MULTIPLE`), which is the default.