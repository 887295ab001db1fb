"""
HTTP Server for the Portal Pages
"""
from crypto_portal.web.server import PortalServer, serve

__all__ = ["PortalServer", "serve"]
