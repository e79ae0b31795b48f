"""Data stores for persistence and caching.

Stores handle:
- Supabase: PostgREST client factory and error formatting
- Cache: in-process TTL cache for repeated queries

No business/ranking logic in stores - that belongs in services.
"""
