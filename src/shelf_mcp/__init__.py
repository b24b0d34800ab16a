"""
shelfmcp - catalog search and categorization for repository-backed projects.

Organizes projects ("books") into sections, ranks them against free-text
queries and assigns them to a fixed taxonomy with confidence scoring.

Stack:
- Python + FastMCP (MCP server surface)
- In-memory inverted index (rebuilt on every mutation)
- PyYAML (catalog and rule files)
- httpx (GitHub as the source of repository data)
"""

__version__ = "0.1.0"
