# -*- coding: utf-8 -*-
"""
Text Prep Service - normalizes pasted HTML and plain text into canonical
Markdown with an outline and diagnostic warnings.
"""
__version__ = "1.0.0"

from .models import NormalizationOptions, PrepareResult  # noqa: E402
from .pipeline import prepare  # noqa: E402

__all__ = ["NormalizationOptions", "PrepareResult", "prepare", "__version__"]
