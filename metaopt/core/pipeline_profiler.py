"""
Timing of named driver phases.

Stage names follow ``<driver>.<phase>``, e.g. ``sa.run``, ``ga.iteration``
or ``alns.weight_update``. Drivers only record when constructed with
``profile=True``.
"""

import threading
import time
from collections import defaultdict
from contextlib import contextmanager, nullcontext
from typing import Any, Dict, Iterator, List, Optional


class PipelineProfiler:
    """Process-wide collector of phase durations."""

    def __init__(self):
        self._lock = threading.Lock()
        self._durations: Dict[str, List[float]] = defaultdict(list)
        self._metadata: Dict[str, Dict[str, Any]] = {}

    def reset(self):
        with self._lock:
            self._durations = defaultdict(list)
            self._metadata = {}

    @contextmanager
    def profile(self, stage: str, metadata: Optional[Dict[str, Any]] = None) -> Iterator[None]:
        """Time the enclosed block under ``stage``."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.record(stage, time.perf_counter() - start, metadata)

    def maybe_profile(self, enabled: bool, stage: str,
                      metadata: Optional[Dict[str, Any]] = None):
        if not enabled:
            return nullcontext()
        return self.profile(stage, metadata)

    def record(self, stage: str, duration: float, metadata: Optional[Dict[str, Any]] = None):
        with self._lock:
            self._durations[stage].append(duration)
            if metadata:
                # Last writer wins; metadata describes the most recent sample
                self._metadata[stage] = dict(metadata)

    def stages(self) -> List[str]:
        with self._lock:
            return list(self._durations)

    def get_summary(self) -> List[Dict[str, Any]]:
        """
        Per-stage statistics, slowest total first.

        Returns:
            List of dicts with stage, count and total/avg/min/max seconds
        """
        with self._lock:
            items = [(stage, list(values)) for stage, values in self._durations.items()]
            metadata = dict(self._metadata)

        summary = []
        for stage, values in items:
            total = sum(values)
            summary.append({
                'stage': stage,
                'count': len(values),
                'total_seconds': total,
                'avg_seconds': total / len(values) if values else 0.0,
                'min_seconds': min(values, default=0.0),
                'max_seconds': max(values, default=0.0),
                'metadata': metadata.get(stage, {}),
            })
        summary.sort(key=lambda item: item['total_seconds'], reverse=True)
        return summary

    def driver_totals(self) -> Dict[str, float]:
        """Seconds spent in ``<driver>.run`` per driver."""
        totals = {}
        for item in self.get_summary():
            driver, _, phase = item['stage'].partition('.')
            if phase == 'run':
                totals[driver] = item['total_seconds']
        return totals

    def format_summary(self, top_n: Optional[int] = None) -> str:
        summary = self.get_summary()[:top_n]
        lines = ["=== Profiling Summary ==="]
        for item in summary:
            lines.append(f"{item['stage']:<28s} n={item['count']:>7d} "
                         f"total={item['total_seconds']:8.4f}s "
                         f"avg={item['avg_seconds'] * 1e3:8.3f}ms "
                         f"max={item['max_seconds'] * 1e3:8.3f}ms")
        return "\n".join(lines)


pipeline_profiler = PipelineProfiler()
