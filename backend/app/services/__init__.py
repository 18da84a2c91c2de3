"""
Services module for the video embed service.

This package contains the embed-resolution pipeline:

- url_recognizer: finds stand-alone YouTube and Vimeo links in text
- oembed_client: fetches and parses provider oEmbed replies
- embed_cache: durable MongoDB cache of resolved embeds
- responsive_wrapper: fluid aspect-ratio container for iframe embeds
- embed_resolver: orchestration and substitution back into the text
"""
