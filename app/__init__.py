"""svc-palette: seasonal color analysis service."""
