from .urls import KNOWN_PROTOCOLS, extract_urls, is_known_protocol

__all__ = ["KNOWN_PROTOCOLS", "extract_urls", "is_known_protocol"]
