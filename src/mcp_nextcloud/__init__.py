"""MCP server for Nextcloud files, calendars and contacts."""
