"""shapemap: reshape dict records by exclusion, renaming and per-field transforms.

See `shapemap/mapper/engine.py` for the mapping entry points.
"""
