"""
Core infrastructure for the video embed service.

- auth: Admin bearer-token dependency for cache maintenance endpoints
- database: MongoDB async client with Motor driver and connection pooling
- migrations: Ordered schema-version steps for the embed cache storage
"""
