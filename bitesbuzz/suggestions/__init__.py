"""
Suggestion engine.

Responsibilities:
- Turn a cart or an order history into a scoring context.
- Filter the menu to candidates the context does not already cover.
- Score candidates with embeddings when available, rule-based heuristics otherwise.
- Return at most four positively scored items plus a short advisory message.
"""
