# -*- coding: utf-8 -*-
"""Switch an editor's extension gallery between known registries."""

__version__ = "0.3.0"
