# planesweep

Depth maps from a small rig of calibrated cameras. A plane sweep builds a
cost cube over 256 depth planes between 0.3 and 1.1 units from the reference
camera (plane 0 is the farthest). The cube is then turned into an 8-bit depth
map in one of two ways: a fast per-pixel minimum, or a slower and smoother
graph-cut labelling. The graph-cut labelling is built on a Boykov–Kolmogorov
max-flow solver that is also usable on its own.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install .[test]
pytest
```

## Command line

```
planesweep [FOLDER] [--window N] [--output PATH] [--fast]
```

- `FOLDER` (default `data`) must hold `v0.png` to `v3.png`, one image per
  camera of the built-in calibration.
- `--window` is the side of the square matching window (default 5).
- `--output` is where the depth map is written (default `./depth_map.png`).
- `--fast` takes the least-cost plane per pixel instead of the graph cut.

The depth map is computed for camera 0 and saved as a grayscale PNG whose
pixel values are plane indices. Progress is logged to standard error.

## Library use

```python
from planesweep.depth import read_cams, sweeping_plane, find_min, depth_estimation_by_graph_cut

cams = read_cams("data")
cost_cube = sweeping_plane(cams[0], cams, 5)       # float32 array (planes, height, width)
quick = find_min(cost_cube)                        # fast, noisy
smooth = depth_estimation_by_graph_cut(cost_cube)  # slow, clean
```

`sweeping_plane` stores, for each pixel and plane, the smallest mean absolute
difference over the other cameras between a window around the pixel and the
window around its projection. Matching uses the first colour plane of each
view. `find_min` gives 255 where no plane costs less than 255.

Camera data lives in `planesweep.cameras`:

- `get_cam_params()` returns the four cameras' `CameraParams`, holding the
  intrinsics `K`, the rotation `R`, the translation `t` and `K_inv`, `R_inv`,
  `t_inv`.
- `Camera` bundles a view's file name, width, height, YUV 4:2:0 byte size,
  colour planes (blue, green, red) and its `CameraParams`.
- `inverse_matrix_3x3` inverts a 3×3 matrix given as 9 row-major values or as
  3 rows; it raises `ValueError` for a singular matrix.
- `Z_NEAR`, `Z_FAR` and `Z_PLANES` set the swept depth range.

The max-flow solver in `planesweep.maxflow`:

```python
from planesweep.maxflow import Graph, Terminal

g = Graph()
a, b = g.add_node(), g.add_node()
g.set_tweights(a, 5, 0)
g.set_tweights(b, 0, 5)
g.add_edge(a, b, 3, 0)
flow = g.maxflow()                 # 3
g.what_segment(a) is Terminal.SOURCE
```

Node ids are plain integers; an unknown id raises `IndexError`. Terminal
weights may be negative, and `add_tweights` adds to weights already set.
`maxflow` is meant to be called once per graph.

## What it does not do

The depth map is only written to a file; nothing is shown on screen.
The calibration of the four cameras is built in and cannot be read from a
file. All computation runs on the CPU, and the graph cut is slow on
full-size images.