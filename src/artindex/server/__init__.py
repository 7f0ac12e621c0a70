"""Tool server for ArtIndex."""

from artindex.server.mcp_server import create_mcp_server
from artindex.server.tools import ProjectTools

__all__ = ["create_mcp_server", "ProjectTools"]
