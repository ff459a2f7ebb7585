"""Template engine (VTL-flavoured, non-Turing-complete).

Turns route parameters into native store requests and native store results
into response bodies.
"""

from src.application.templating.filters import FILTERS
from src.application.templating.template import Template, compile_template

__all__ = ["FILTERS", "Template", "compile_template"]
