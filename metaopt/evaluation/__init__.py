"""
Reporting: multi-algorithm comparison and result export.
"""

from .comparator import AlgorithmComparator, gap_percent
from .result_exporter import ResultExporter

__all__ = ['AlgorithmComparator', 'gap_percent', 'ResultExporter']
