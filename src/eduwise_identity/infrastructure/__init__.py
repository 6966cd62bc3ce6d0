"""Identity infrastructure: persistence and email delivery."""
