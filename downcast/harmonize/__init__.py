"""Variable registry: display labels, units, and column aliases."""
