"""
Menu catalog package.

Responsibilities:
- Define the canonical CatalogItem and ContextEntry models.
- Load and validate the cafeteria menu (the catalog boundary).
- Normalize a raw menu export into the canonical CSV.
"""
