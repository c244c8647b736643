"""
Core components.

This package contains the pieces the adapters are built on:
- Severity mapping
- Caller context resolution
- Ingestion client contract
- Metrics collection
"""
