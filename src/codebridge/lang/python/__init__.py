from .extractor import PythonExtractor, slice_span
from .annotations import render_annotation
from .shapes import DeclShape, SHAPE_KINDS

__all__ = [
    "PythonExtractor",
    "slice_span",
    "render_annotation",
    "DeclShape",
    "SHAPE_KINDS",
]
