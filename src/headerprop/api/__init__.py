"""HTTP surface: event ingestion, cache admin and health."""
