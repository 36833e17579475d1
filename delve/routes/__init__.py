"""HTTP blueprints: dungeon generation, seed coercion and settings round-trip."""
