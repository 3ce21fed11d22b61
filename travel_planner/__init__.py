"""travel-planner backend package."""
