"""
Catalog-level recommendations.

Responsibilities:
- Popular items for new users.
- Personalized recommendations weighted by order history.
- Items similar to a given item.
- Trending (promotional) items.
"""
