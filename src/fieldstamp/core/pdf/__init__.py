"""Page geometry, rotation handling and drawing into pikepdf documents."""

from .canvas import FieldCanvas
from .geometry import (
    FieldBox,
    PageGeometry,
    compute_field_box,
    get_page_geometry,
    normalize_rotation,
)
from .rotation import (
    adjust_position_for_rotation,
    apply_page_rotation,
    rotated_bbox,
    rotation_matrix,
)

__all__ = [
    "FieldBox",
    "FieldCanvas",
    "PageGeometry",
    "adjust_position_for_rotation",
    "apply_page_rotation",
    "compute_field_box",
    "get_page_geometry",
    "normalize_rotation",
    "rotated_bbox",
    "rotation_matrix",
]
