"""Radar chart catalog and payload helpers.

Charts are described declaratively in `registry` and built from enriched
shots into typed payloads (`payloads`). Captions come from `insights`.
"""
