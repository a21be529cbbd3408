"""
Exporter implementations.

Available implementations:
- TextListExporter: Writes the paths of kept samples, one per line
"""

from .text_exporter import TextListExporter, filter_results

__all__ = ["TextListExporter", "filter_results"]
