"""
Video Embed Service API Package.

Endpoints are organized by version so later versions can be added without
breaking existing clients.

Package Structure:
    - v1/: Version 1 API endpoints (current stable version)
        - embeds.py: Embed rendering and cache maintenance endpoints
"""
