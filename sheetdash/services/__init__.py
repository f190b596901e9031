"""Core services: normalizer, join engine, type inference, aggregator and the build pipeline."""
