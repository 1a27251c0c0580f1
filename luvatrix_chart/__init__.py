from luvatrix_chart.chart import Chart
from luvatrix_chart.commands import DrawCommand, EllipseCommand, LineCommand, PolygonCommand, RectCommand, TextCommand
from luvatrix_chart.config import ChartConfig, load_chart_config, validate_chart_config
from luvatrix_chart.errors import CapabilityError, ChartError, ChartObjectError, ScaleError
from luvatrix_chart.events import ChartInputEvent, MouseButton, parse_hdi_pointer_event
from luvatrix_chart.geometry import RealPoint, RealRect, RealSize
from luvatrix_chart.objects import (
    ChartEllipse,
    ChartFunction,
    ChartLine,
    ChartObject,
    ChartObjectFlags,
    ChartPoint,
    ChartPolygon,
    ChartRectangle,
)
from luvatrix_chart.sampler import Extremum, SampledCurve, sample_function
from luvatrix_chart.transform import ViewTransform

__all__ = [
    "CapabilityError",
    "Chart",
    "ChartConfig",
    "ChartEllipse",
    "ChartError",
    "ChartFunction",
    "ChartInputEvent",
    "ChartLine",
    "ChartObject",
    "ChartObjectError",
    "ChartObjectFlags",
    "ChartPoint",
    "ChartPolygon",
    "ChartRectangle",
    "DrawCommand",
    "EllipseCommand",
    "Extremum",
    "LineCommand",
    "MouseButton",
    "PolygonCommand",
    "RealPoint",
    "RealRect",
    "RealSize",
    "RectCommand",
    "SampledCurve",
    "ScaleError",
    "TextCommand",
    "ViewTransform",
    "load_chart_config",
    "parse_hdi_pointer_event",
    "sample_function",
    "validate_chart_config",
]
