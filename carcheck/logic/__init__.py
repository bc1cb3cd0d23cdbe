"""Logic modules for CarCheck Service."""

from carcheck.logic import preprocessor
from carcheck.logic import guardrails
from carcheck.logic import postprocessor
from carcheck.logic import scorer

__all__ = ["preprocessor", "guardrails", "postprocessor", "scorer"]
