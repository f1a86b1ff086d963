# src/cryptotrack/__init__.py
"""
CryptoTrack - Crypto Pricing API Client Core

Keeps several feeds of a remote pricing API (instrument list, price
history, API usage counters) in sync on independent schedules, isolates
per-feed failures, classifies the usage budget and converts instrument
symbols between their routing and display forms.
"""

__version__ = "1.0.0"
