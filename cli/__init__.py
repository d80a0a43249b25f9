"""Console entry points for LiveNet."""
