"""Camera calibration data and the depth range swept by the plane-sweep stereo."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

Z_NEAR = 0.3
Z_FAR = 1.1
Z_PLANES = 256


def inverse_matrix_3x3(matrix) -> np.ndarray:
    """Return the inverse of a 3x3 matrix given as 9 values or as 3 rows of 3."""
    a = np.asarray(matrix, dtype=np.float64).reshape(3, 3)
    determinant = np.linalg.det(a)
    if determinant == 0.0:
        raise ValueError("matrix is singular")
    return np.linalg.inv(a)


@dataclass(eq=False)
class CameraParams:
    """Intrinsic matrix K, rotation R and translation t of a camera, with their inverses."""

    K: np.ndarray
    R: np.ndarray
    t: np.ndarray
    K_inv: np.ndarray = field(init=False)
    R_inv: np.ndarray = field(init=False)
    t_inv: np.ndarray = field(init=False)

    def __post_init__(self) -> None:
        self.K = np.asarray(self.K, dtype=np.float64).reshape(3, 3)
        self.R = np.asarray(self.R, dtype=np.float64).reshape(3, 3)
        self.t = np.asarray(self.t, dtype=np.float64).reshape(3)
        self.K_inv = inverse_matrix_3x3(self.K)
        self.R_inv = inverse_matrix_3x3(self.R)
        self.t_inv = -self.t


@dataclass(eq=False)
class Camera:
    """A camera view: its image file, dimensions, colour planes and calibration.

    ``planes`` holds the image's colour planes in blue, green, red order;
    matching uses the first of them. ``size`` is the byte size of the view
    in YUV 4:2:0.
    """

    name: str
    width: int
    height: int
    size: int
    planes: list[np.ndarray]
    params: CameraParams


_K = (
    986.516, 0.0, 953.688,
    0.0, 982.085, 540.502,
    0.0, 0.0, 1.0,
)

_R = (
    1.0, 0.0, 0.0,
    0.0, 1.0, 0.0,
    0.0, 0.0, 1.0,
)

_TRANSLATIONS = (
    (0.0, 0.0, 0.0),
    (-0.1521096, 3.239999999999916e-05, -0.0016169400000000007),
    (0.0008177000000000013, -0.0306728, -0.0018216940000000004),
    (-0.15210510000000002, -0.0318605, -0.0018633990000000017),
)


def get_cam_params() -> list[CameraParams]:
    """Return the calibration of the four cameras of the rig, camera 0 first."""
    return [CameraParams(_K, _R, t) for t in _TRANSLATIONS]