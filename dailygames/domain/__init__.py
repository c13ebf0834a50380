"""Domain layer (pure logic).

- Keep game rules, seeded choices, sanitizing and economics here.
- Avoid I/O: no cache store, no HTTP/FastAPI, no text-generation calls.
- Prefer deterministic functions (dates and seeds are passed in as arguments).
"""
