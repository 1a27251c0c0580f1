from .canvas import blend_mask, draw_pixel, new_canvas
from .draw_lines import clip_segment, draw_polyline, draw_segment
from .draw_shapes import fill_ellipse, fill_polygon, fill_rect, stroke_ellipse, stroke_rect
from .draw_text import draw_text, text_size
from .render import execute, rasterize

__all__ = [
    "blend_mask",
    "clip_segment",
    "draw_pixel",
    "draw_polyline",
    "draw_segment",
    "draw_text",
    "execute",
    "fill_ellipse",
    "fill_polygon",
    "fill_rect",
    "new_canvas",
    "rasterize",
    "stroke_ellipse",
    "stroke_rect",
    "text_size",
]
