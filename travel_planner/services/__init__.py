"""Service layer: exports, geography browsing, user POIs and search history."""
