"""Actions package - Everything that happens after the scan.

Actions never send requests; they render or store results.
"""

from chopchop.actions.export import export_results

__all__ = ["export_results"]
