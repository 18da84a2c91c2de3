"""
Video Embed Service Backend Application Package

Turns stand-alone YouTube and Vimeo links in user-authored text into
playable embeds using the providers' oEmbed endpoints, with a durable
MongoDB cache so each video is fetched only once.

Package Structure:
- api/: REST API endpoints organized by version (v1)
- core/: Core infrastructure (database, migrations, admin auth)
- models/: Pydantic data models
- services/: Recognition, oEmbed, cache, responsive wrapping and resolution
- utils/: Logging helpers
"""

__version__ = "1.0.0"
__app_name__ = "video-embed-service"
