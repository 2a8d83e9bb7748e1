"""
Core data models for 2D25D.

All models use Pydantic for validation and serialization. They are frozen:
every pipeline stage returns new instances and none can mutate its input.
"""

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from d25d.core.exceptions import MalformedInputError
from d25d.core.geometry_utils import EPSILON, centroid, signed_area


class FaceStyle(str, Enum):
    """Style tag carried from extrusion through to the renderer."""
    TOP = "top"
    BOTTOM = "bottom"
    SIDE = "side"


class Point2D(BaseModel):
    """2D point in plan space (mm)."""
    model_config = ConfigDict(frozen=True)

    x: float
    y: float

    def distance_to(self, other: "Point2D") -> float:
        """Calculate Euclidean distance to another point."""
        return ((self.x - other.x) ** 2 + (self.y - other.y) ** 2) ** 0.5

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @classmethod
    def coerce(cls, value: Any) -> "Point2D":
        """
        Build a point from a Point2D, an ``{x, y}`` mapping or an ``[x, y]`` sequence.

        Raises:
            MalformedInputError: If the value cannot be read as a 2D point
        """
        if isinstance(value, Point2D):
            return value
        try:
            if isinstance(value, Mapping):
                return cls(x=value["x"], y=value["y"])
            return cls(x=value[0], y=value[1])
        except (KeyError, IndexError, TypeError, ValidationError) as e:
            raise MalformedInputError(
                f"Cannot read 2D point from {value!r}", {"value": repr(value)}
            ) from e


class Point3D(BaseModel):
    """3D point (or vector) in model space (mm)."""
    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    z: float = 0.0

    def distance_to(self, other: "Point3D") -> float:
        """Calculate Euclidean distance to another point."""
        return ((self.x - other.x) ** 2 +
                (self.y - other.y) ** 2 +
                (self.z - other.z) ** 2) ** 0.5

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    @classmethod
    def coerce(cls, value: Any) -> "Point3D":
        """Build a point from a Point3D, an ``{x, y, z}`` mapping or an ``[x, y, z]`` sequence."""
        if isinstance(value, Point3D):
            return value
        try:
            if isinstance(value, Mapping):
                return cls(x=value["x"], y=value["y"], z=value.get("z", 0.0))
            return cls(x=value[0], y=value[1], z=value[2] if len(value) > 2 else 0.0)
        except (KeyError, IndexError, TypeError, ValidationError) as e:
            raise MalformedInputError(
                f"Cannot read 3D point from {value!r}", {"value": repr(value)}
            ) from e


class BoundingBox(BaseModel):
    """Axis-aligned 2D bounding box."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def of_points(cls, points: Sequence[Point2D]) -> Optional["BoundingBox"]:
        if not points:
            return None
        return cls(
            min_x=min(p.x for p in points),
            min_y=min(p.y for p in points),
            max_x=max(p.x for p in points),
            max_y=max(p.y for p in points),
        )

    def width(self) -> float:
        return self.max_x - self.min_x

    def height(self) -> float:
        return self.max_y - self.min_y


class Polyline(BaseModel):
    """
    Ordered 2D point sequence.

    A closed polyline connects its last point back to its first implicitly;
    the closing vertex is never stored twice.
    """
    model_config = ConfigDict(frozen=True)

    points: Tuple[Point2D, ...]
    closed: bool = False

    @model_validator(mode="after")
    def _check_points(self) -> "Polyline":
        minimum = 3 if self.closed else 2
        if len(self.points) < minimum:
            kind = "closed" if self.closed else "open"
            raise ValueError(
                f"{kind} polyline needs at least {minimum} points, got {len(self.points)}"
            )

        for i in range(len(self.points) - 1):
            if self.points[i].distance_to(self.points[i + 1]) < EPSILON:
                raise ValueError(f"consecutive points {i} and {i + 1} coincide")

        if self.closed and self.points[0].distance_to(self.points[-1]) < EPSILON:
            raise ValueError("closed polyline repeats its first point as its last")

        return self

    @classmethod
    def from_points(cls, points: Sequence[Any], closed: Optional[bool] = None) -> "Polyline":
        """
        Build a polyline from raw points.

        Args:
            points: Point2D objects, ``[x, y]`` pairs or ``{x, y}`` mappings
            closed: Closure flag. None means "closed if the last point repeats
                    the first". An explicit repeated end point is dropped for
                    closed polylines.

        Raises:
            MalformedInputError: If the points do not form a valid polyline
        """
        if isinstance(points, (str, bytes)) or not isinstance(points, Sequence):
            raise MalformedInputError("Polyline points must be a sequence", {"value": repr(points)})

        coords = [Point2D.coerce(p) for p in points]
        explicitly_closed = len(coords) >= 3 and coords[0].distance_to(coords[-1]) < EPSILON

        if closed is None:
            closed = explicitly_closed
        if closed and explicitly_closed:
            coords = coords[:-1]

        try:
            return cls(points=tuple(coords), closed=closed)
        except ValidationError as e:
            raise MalformedInputError(
                f"Invalid polyline: {e.errors()[0]['msg']}",
                {"point_count": str(len(coords)), "closed": str(closed)},
            ) from e

    def segments(self) -> List[Tuple[Point2D, Point2D]]:
        """Consecutive point pairs, including the closing segment for closed polylines."""
        pairs = list(zip(self.points, self.points[1:]))
        if self.closed:
            pairs.append((self.points[-1], self.points[0]))
        return pairs

    def __len__(self) -> int:
        return len(self.points)


class Wall(BaseModel):
    """Wall described by its centerline, thickness and height (mm)."""
    model_config = ConfigDict(frozen=True)

    centerline: Polyline
    thickness: float
    height: float
    name: Optional[str] = None

    @field_validator("thickness", "height")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """Thickness and height must be strictly positive."""
        if not v > 0.0:
            raise ValueError("must be greater than 0")
        return v


class OffsetPair(BaseModel):
    """Left/right boundary curves of a wall."""
    model_config = ConfigDict(frozen=True)

    left: Polyline
    right: Polyline

    @property
    def closed(self) -> bool:
        return self.left.closed


class Footprint(BaseModel):
    """Closed plan outline of a wall's solid (closing edge implicit)."""
    model_config = ConfigDict(frozen=True)

    points: Tuple[Point2D, ...] = Field(min_length=3)

    def signed_area(self) -> float:
        return signed_area([p.as_tuple() for p in self.points])

    def area(self) -> float:
        return abs(self.signed_area())

    def __len__(self) -> int:
        return len(self.points)


class Face(BaseModel):
    """Planar polygon of a wall volume with its outward unit normal."""
    model_config = ConfigDict(frozen=True)

    vertices: Tuple[Point3D, ...] = Field(min_length=3)
    normal: Point3D
    style: FaceStyle

    def centroid(self) -> Point3D:
        cx, cy, cz = centroid(v.as_tuple() for v in self.vertices)
        return Point3D(x=cx, y=cy, z=cz)


class WallVolume(BaseModel):
    """Extruded wall: caps plus one side face per footprint edge."""
    model_config = ConfigDict(frozen=True)

    faces: Tuple[Face, ...]
    footprint: Footprint
    height: float

    @property
    def vertices(self) -> List[Point3D]:
        """Distinct vertices in first-seen order."""
        seen: Dict[Point3D, None] = {}
        for face in self.faces:
            for vertex in face.vertices:
                seen.setdefault(vertex, None)
        return list(seen)

    @property
    def edges(self) -> List[Tuple[Point3D, Point3D]]:
        """Distinct undirected edges in first-seen order."""
        seen: Dict[frozenset, Tuple[Point3D, Point3D]] = {}
        for face in self.faces:
            n = len(face.vertices)
            for i in range(n):
                a = face.vertices[i]
                b = face.vertices[(i + 1) % n]
                seen.setdefault(frozenset((a, b)), (a, b))
        return list(seen.values())

    def faces_with_style(self, style: FaceStyle) -> List[Face]:
        return [f for f in self.faces if f.style == style]


class AxonFace(BaseModel):
    """Face after projection: 2D loop plus a depth used only for ordering."""
    model_config = ConfigDict(frozen=True)

    points: Tuple[Point2D, ...]
    depth: float
    style: FaceStyle
    normal: Optional[Point3D] = None
    wall_index: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Renderer boundary format: ``{points: [[x, y], ...], style}``."""
        return {
            "points": [[p.x, p.y] for p in self.points],
            "style": self.style.value,
        }


class RawPath(BaseModel):
    """Vectorized path as delivered by the upstream tracer."""
    points: List[Tuple[float, float]]
    closed: bool = False


class WallResult(BaseModel):
    """Outcome of running the per-wall pipeline on one wall."""
    wall_index: int
    faces: Tuple[AxonFace, ...] = ()
    error: Optional[str] = None
    error_type: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class AxonDrawing(BaseModel):
    """Globally ordered faces of a scene plus the walls that failed."""
    faces: List[AxonFace] = Field(default_factory=list)
    results: List[WallResult] = Field(default_factory=list)

    @property
    def failed_walls(self) -> List[WallResult]:
        return [r for r in self.results if not r.ok]

    def bounding_box(self) -> Optional[BoundingBox]:
        return BoundingBox.of_points([p for face in self.faces for p in face.points])

    def to_dicts(self) -> List[Dict[str, Any]]:
        return [face.to_dict() for face in self.faces]

    def __str__(self) -> str:
        return (f"AxonDrawing({len(self.faces)} faces, "
                f"{len(self.results) - len(self.failed_walls)}/{len(self.results)} walls ok)")
