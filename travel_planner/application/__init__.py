"""Application layer: itinerary rules, city resolution, lookups and search."""
