"""Engine package - Matching, blocking policy and hit aggregation."""

from chopchop.engine.aggregator import ResultCollector, sort_hits
from chopchop.engine.matcher import match
from chopchop.engine.policy import exit_code, max_severity, should_block

__all__ = ["ResultCollector", "exit_code", "match", "max_severity", "should_block", "sort_hits"]
