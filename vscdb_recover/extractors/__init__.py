"""
Extractors pulling conversation-relevant entries out of key-value stores.
"""

from .table_scanner import ScanResult, TableScanner

__all__ = ["ScanResult", "TableScanner"]
