"""Plane-sweep depth estimation with optional graph-cut regularisation."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import numpy as np
from PIL import Image

from .cameras import Z_FAR, Z_NEAR, Z_PLANES, Camera, get_cam_params
from .maxflow import Graph, Terminal

log = logging.getLogger(__name__)

_SHRT_MAX = 32767
_SMOOTHING_LAMBDA = 1.0


def read_cams(folder) -> list[Camera]:
    """Load the views v0.png, v1.png, ... of the rig from a folder."""
    cameras = []
    for i, params in enumerate(get_cam_params()):
        name = f"{folder}/v{i}.png"
        with Image.open(name) as image:
            rgb = np.asarray(image.convert("RGB"), dtype=np.uint8)
        height, width = rgb.shape[:2]
        planes = [rgb[:, :, c].copy() for c in (2, 1, 0)]
        size = int(width * height * 1.5)
        cameras.append(Camera(name, width, height, size, planes, params))
    return cameras


def _plane_depth(zi: int) -> float:
    """Depth of plane zi; plane 0 lies at Z_FAR."""
    return Z_NEAR * Z_FAR / (Z_NEAR + (zi / Z_PLANES) * (Z_FAR - Z_NEAR))


def _project(ref: Camera, cam: Camera, z: float, xs: np.ndarray, ys: np.ndarray):
    """Project reference pixels at depth z into cam; out-of-view coordinates become 0."""
    rp, cp = ref.params, cam.params
    pixels = np.stack([xs, ys, np.ones_like(xs)])
    ref_points = np.tensordot(rp.K_inv, pixels, axes=1) * z
    world = np.tensordot(rp.R_inv, ref_points, axes=1) - rp.t_inv[:, None, None]
    proj = np.tensordot(cp.R, world, axes=1) - cp.t[:, None, None]
    with np.errstate(divide="ignore", invalid="ignore"):
        px = proj[0] / proj[2]
        py = proj[1] / proj[2]
        x_proj = cp.K[0, 0] * px + cp.K[0, 1] * py + cp.K[0, 2]
        y_proj = cp.K[1, 0] * px + cp.K[1, 1] * py + cp.K[1, 2]
        x_in = (x_proj >= 0) & (x_proj < cam.width)
        y_in = (y_proj >= 0) & (y_proj < cam.height)
        x_proj = np.where(x_in, np.floor(np.where(x_in, x_proj, 0) + 0.5), 0)
        y_proj = np.where(y_in, np.floor(np.where(y_in, y_proj, 0) + 0.5), 0)
    return x_proj.astype(np.int64), y_proj.astype(np.int64)


def _window_cost(ref: Camera, cam: Camera, xs, ys, xp, yp, window: int) -> np.ndarray:
    ref_plane = ref.planes[0].astype(np.int32)
    cam_plane = cam.planes[0].astype(np.int32)
    cost = np.zeros(xs.shape, dtype=np.float32)
    count = np.zeros(xs.shape, dtype=np.float32)
    half = window // 2
    for k in range(-half, half + 1):
        for l in range(-half, half + 1):
            rx, ry = xs + l, ys + k
            cx, cy = xp + l, yp + k
            valid = (
                (rx >= 0) & (rx < ref.width) & (ry >= 0) & (ry < ref.height)
                & (cx >= 0) & (cx < cam.width) & (cy >= 0) & (cy < cam.height)
            )
            diff = np.abs(
                ref_plane[np.clip(ry, 0, ref.height - 1), np.clip(rx, 0, ref.width - 1)]
                - cam_plane[np.clip(cy, 0, cam.height - 1), np.clip(cx, 0, cam.width - 1)]
            )
            cost += np.where(valid, diff, 0).astype(np.float32)
            count += valid.astype(np.float32)
    with np.errstate(divide="ignore", invalid="ignore"):
        return cost / count


def sweeping_plane(ref: Camera, cameras, window: int = 3) -> np.ndarray:
    """Build the cost cube (planes, height, width) of the reference view.

    Each entry is the smallest mean absolute difference, over the other
    cameras, of a window around the pixel and its projection at that depth.
    """
    cost_cube = np.full((Z_PLANES, ref.height, ref.width), 255.0, dtype=np.float32)
    ys, xs = np.mgrid[0:ref.height, 0:ref.width]
    xs_f = xs.astype(np.float64)
    ys_f = ys.astype(np.float64)
    for cam in cameras:
        if cam.name == ref.name:
            continue
        log.info("Cam: %s", cam.name)
        for zi in range(Z_PLANES):
            log.debug("Plane %d", zi)
            xp, yp = _project(ref, cam, _plane_depth(zi), xs_f, ys_f)
            cost = _window_cost(ref, cam, xs, ys, xp, yp, window)
            np.fmin(cost_cube[zi], cost, out=cost_cube[zi])
    return cost_cube


def find_min(cost_cube) -> np.ndarray:
    """Depth map holding, per pixel, the first plane of least cost (255 where none is below 255)."""
    cube = np.asarray(cost_cube, dtype=np.float32)
    best = cube.min(axis=0)
    depth = np.where(best < 255.0, cube.argmin(axis=0), 255)
    return depth.astype(np.uint8)


def _add_neighbour(graph: Graph, nodes, labels, edge_cost, src, dst, label, cost_cur) -> None:
    src_label = labels[src[0]][src[1]]
    dst_label = labels[dst[0]][dst[1]]
    src_node = nodes[src[0]][src[1]]
    dst_node = nodes[dst[0]][dst[1]]
    if src_label != dst_label:
        extra = graph.add_node()
        cost_temp = edge_cost[abs(dst_label - label)]
        graph.set_tweights(extra, 0.0, edge_cost[abs(src_label - dst_label)])
        graph.add_edge(src_node, extra, cost_cur, cost_cur)
        graph.add_edge(extra, dst_node, cost_temp, cost_temp)
    else:
        graph.add_edge(src_node, dst_node, cost_cur, cost_cur)


def depth_estimation_by_graph_cut(cost_cube) -> np.ndarray:
    """Depth map from the cost cube by alpha-expansion over the planes with graph cuts."""
    cube = np.asarray(cost_cube, dtype=np.float32)
    planes, height, width = cube.shape
    costs = cube.tolist()
    labels = [[0] * width for _ in range(height)]
    edge_cost = [_SMOOTHING_LAMBDA * i for i in range(planes)]

    for source in range(planes):
        log.info("depth layer %d", source)
        graph = Graph()
        nodes = [[0] * width for _ in range(height)]
        for r in range(height):
            for c in range(width):
                node = graph.add_node()
                nodes[r][c] = node
                label = labels[r][c]
                cap_source = costs[source][r][c]
                cap_sink = _SHRT_MAX if label == source else costs[label][r][c]
                graph.set_tweights(node, cap_source, cap_sink)

        for j in range(height):
            for i in range(width):
                cost_cur = edge_cost[abs(labels[j][i] - source)]
                if i != width - 1:
                    _add_neighbour(graph, nodes, labels, edge_cost, (j, i), (j, i + 1), source, cost_cur)
                if j != height - 1:
                    _add_neighbour(graph, nodes, labels, edge_cost, (j, i), (j + 1, i), source, cost_cur)

        graph.maxflow()

        for r in range(height):
            for c in range(width):
                if graph.what_segment(nodes[r][c]) != Terminal.SOURCE:
                    labels[r][c] = source

    return np.clip(np.array(labels, dtype=np.int64), 0, 255).astype(np.uint8)


def main(argv=None) -> int:
    """Compute the depth map of camera 0 and write it as a PNG image."""
    parser = argparse.ArgumentParser(description="Plane-sweep depth estimation.")
    parser.add_argument("folder", nargs="?", default="data", help="folder holding v0.png, v1.png, ...")
    parser.add_argument("--window", type=int, default=5, help="matching window size")
    parser.add_argument("--output", default="./depth_map.png", help="path of the depth map to write")
    parser.add_argument("--fast", action="store_true", help="take the least-cost plane instead of graph cuts")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(message)s")
    cameras = read_cams(args.folder)
    cost_cube = sweeping_plane(cameras[0], cameras, args.window)
    depth = find_min(cost_cube) if args.fast else depth_estimation_by_graph_cut(cost_cube)
    Image.fromarray(depth, mode="L").save(args.output)
    return 0