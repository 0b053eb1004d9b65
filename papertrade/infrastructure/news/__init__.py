"""
External news generation infrastructure.
"""

from .http_text_generator import HttpTextGenerator, parse_headline_payload, parse_headline_text

__all__ = ["HttpTextGenerator", "parse_headline_payload", "parse_headline_text"]
