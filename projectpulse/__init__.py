"""ProjectPulse notification pipeline package.

The package intentionally re-exports nothing; subpackages are imported by
their full dotted path.
"""
