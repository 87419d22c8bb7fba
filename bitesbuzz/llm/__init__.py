"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Reword the rule-selected suggestion message into a friendlier one.
- Graceful fallback when the LLM is unavailable or returns invalid output.
"""
