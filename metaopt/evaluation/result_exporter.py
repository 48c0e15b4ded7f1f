"""
Result export module for metaopt.
Exports convergence traces and run summaries for analysis.
"""

import json
import logging
import os
from datetime import datetime
from typing import Dict, List, Optional

import pandas as pd

from metaopt.evaluation.comparator import gap_percent
from metaopt.models.solution import OptimizationResult

logger = logging.getLogger(__name__)


class ResultExporter:
    """Exports optimization results as CSV and JSON."""

    def __init__(self, output_dir: str = "results"):
        """
        Initialize result exporter.

        Args:
            output_dir: Output directory for results
        """
        self.output_dir = output_dir
        self.timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        os.makedirs(self.output_dir, exist_ok=True)

    def export_convergence(self, result: OptimizationResult,
                           filename: Optional[str] = None) -> str:
        """
        Export a convergence trace to CSV.

        Args:
            result: Run result
            filename: Output filename (auto-generated if None)

        Returns:
            Path to exported file
        """
        if filename is None:
            filename = f"convergence_{result.algorithm or 'run'}_{self.timestamp}.csv"
        filepath = os.path.join(self.output_dir, filename)

        trace = result.convergence
        df = pd.DataFrame({'iteration': range(len(trace)), 'best_cost': trace})
        df.to_csv(filepath, index=False)

        logger.info(f"Convergence data exported to: {filepath}")
        return filepath

    def export_summary(self, results: Dict[str, OptimizationResult],
                       filename: Optional[str] = None,
                       known_optimum: Optional[float] = None) -> str:
        """
        Export one summary row per result to CSV.

        Args:
            results: Results keyed by label
            filename: Output filename (auto-generated if None)
            known_optimum: Adds a ``gap_percent`` column when given

        Returns:
            Path to exported file
        """
        if filename is None:
            filename = f"summary_{self.timestamp}.csv"
        filepath = os.path.join(self.output_dir, filename)

        rows: List[Dict] = []
        for label, result in results.items():
            row = result.summary()
            row['label'] = label
            if known_optimum is not None:
                row['gap_percent'] = gap_percent(row['best_cost'], known_optimum)
            rows.append(row)

        df = pd.DataFrame(rows)
        if not df.empty:
            df = df[['label'] + [c for c in df.columns if c != 'label']]
        df.to_csv(filepath, index=False)

        logger.info(f"Summary exported to: {filepath}")
        return filepath

    def save_result_json(self, result: OptimizationResult, filename: Optional[str] = None,
                         metadata: Optional[Dict] = None) -> str:
        """
        Save best solution, counters and trace as JSON.

        Args:
            result: Run result
            filename: Output filename (auto-generated if None)
            metadata: Extra fields such as problem name or config

        Returns:
            Path to saved file
        """
        if filename is None:
            filename = f"result_{result.algorithm or 'run'}_{self.timestamp}.json"
        filepath = os.path.join(self.output_dir, filename)

        payload = result.to_dict()
        payload['exported_at'] = datetime.now().isoformat()
        if metadata:
            payload['metadata'] = metadata

        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(payload, f, indent=2, default=str)

        logger.info(f"Result saved to: {filepath}")
        return filepath
