"""Enterprise intelligence: Fortune registries linked to a crypto company directory."""
