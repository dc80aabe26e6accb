"""M3 Matka results backend."""
