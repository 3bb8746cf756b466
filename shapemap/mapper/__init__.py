"""Mapper: reshape a record into a new record.

- engine.py: map_record / Mapper (exclude, rename, transform)
- clone.py: deep copy with cycle detection, scoped to one call
- options.py: MapOptions and the Leaf / Nested transform variant
- profiles.py + mappings/*.json: named mapping profiles; leaves are converter names
"""
