"""
StockChart Core

Technical indicators and zoomable chart series for the portfolio app.
"""

__version__ = "0.1.0"
