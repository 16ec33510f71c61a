"""Pure analytics over energy usage records."""
