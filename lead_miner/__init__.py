"""Lead Miner package.

Provides the AI-grounded business search client, the multi-page lead aggregator, exporting utilities, and a CLI entry point.
"""

__all__ = [
    "utils",
    "models",
    "parser",
    "aggregator",
    "exporter",
    "config",
]
