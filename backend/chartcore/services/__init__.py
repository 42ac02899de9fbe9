"""
StockChart Services

Indicator engine, chart series manager, cache and data sources.
Each service has a defined interface (contract) and implementation.
"""

from chartcore.services.base import BaseService

__all__ = ["BaseService"]
