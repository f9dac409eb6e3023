"""checklints core: data model, caches, pipeline executor and evaluation engine."""
