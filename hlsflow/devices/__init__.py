"""
Device pin catalogs shipped with hlsflow.

Catalog data lives in pin_catalog.yml; use ``pin_library.get_pin_library()``
to query it.
"""
