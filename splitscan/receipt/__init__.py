"""Receipt parsing: detector adapters, geometry and line-item reconstruction."""
