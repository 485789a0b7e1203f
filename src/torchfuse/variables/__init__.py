from .stamped import Stamped
from .point import Point2D, Point3D
from .orientation import Orientation2D, Orientation3D, \
    Orientation2DLocalParameterization, Orientation3DLocalParameterization
from .pinhole_camera import PinholeCamera

__all__ = [
    "Stamped",
    "Point2D",
    "Point3D",
    "Orientation2D",
    "Orientation3D",
    "Orientation2DLocalParameterization",
    "Orientation3DLocalParameterization",
    "PinholeCamera"
]
