"""Console adapters rendered with Rich."""
