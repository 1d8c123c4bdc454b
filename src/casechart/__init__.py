"""Render regional COVID-19 case counts as a zoomable terminal chart."""

__version__ = "0.1.0"
