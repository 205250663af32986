"""Markdown transforms invoked from managed README blocks."""

from typing import Any, Callable, Dict, Mapping, Optional

from ..context import WorkingContext
from .acknowledgments import acknowledgments_transform, render_acknowledgments
from .badges import badges_transform, render_badges
from .options import TransformSettings

Transform = Callable[[WorkingContext, Optional[Mapping[str, Any]], Optional[TransformSettings]], str]

TRANSFORMS: Dict[str, Transform] = {
    "BADGES": badges_transform,
    "ACKNOWLEDGMENTS": acknowledgments_transform,
}

__all__ = [
    "TRANSFORMS",
    "Transform",
    "TransformSettings",
    "render_acknowledgments",
    "render_badges",
]
