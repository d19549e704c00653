"""
Services Layer

Business logic that:
- Accepts domain inputs (IDs, sessions, collaborators)
- Returns domain outputs (models, result objects)
- Does NOT depend on HTTP request/response objects
"""
