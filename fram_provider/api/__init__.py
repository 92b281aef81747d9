"""HTTP surface of the plugin server."""
