# wu_palette/__init__.py
"""
wu_palette package.

Purpose:
  Wu colour quantization of RGBA images into a bounded palette. See
  quantize_image.py for the CLI.

Public API:
  quantize_pixels : build the palette (boxes + mean colours) for an RGBA array.
  quantize_image  : quantize and map every pixel to a palette index.
  QuantizeOptions : alpha threshold, alpha fader and colour budget.
  QuantizeResult  : boxes, lookups and the reserved transparent slot.
  Pixel           : (alpha, red, green, blue) value type.
  histogram       : 4-D moment histogram and cumulative transform.
  queries         : inclusion-exclusion region queries (top/bottom/volume).
  cut, partition  : cut search and greedy box splitting.
  mapping         : pixel -> palette index strategies.
  image_io        : Pillow load/save helpers.
  utils           : formatting and logging helpers.

Quick start:
  from wu_palette import quantize_pixels, QuantizeOptions
  result = quantize_pixels(rgba, QuantizeOptions(max_colors=64))
  result.palette  # list[Pixel]
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import constants
from . import core_types
from . import box
from . import moments
from . import histogram
from . import queries
from . import cut
from . import partition
from . import lookups
from . import mapping
from . import image_io
from . import utils

from .core_types import Pixel  # noqa: E402,F401
from .box import Box  # noqa: E402,F401
from .moments import ColorMoment  # noqa: E402,F401
from .quantize import (  # noqa: E402,F401
    QuantizeOptions,
    QuantizeResult,
    quantize_image,
    quantize_pixels,
)

__all__ = [
    "__version__",
    "constants",
    "core_types",
    "box",
    "moments",
    "histogram",
    "queries",
    "cut",
    "partition",
    "lookups",
    "mapping",
    "image_io",
    "utils",
    "Pixel",
    "Box",
    "ColorMoment",
    "QuantizeOptions",
    "QuantizeResult",
    "quantize_image",
    "quantize_pixels",
]
