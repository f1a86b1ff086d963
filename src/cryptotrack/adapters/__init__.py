# src/cryptotrack/adapters/__init__.py
"""
Adapters Layer - External Interfaces

This package contains adapters for external systems:
- api: HTTP client for the pricing backend
"""
