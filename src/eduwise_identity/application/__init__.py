"""Identity application layer: services, commands, queries, ports."""
