"""EDA Show content generation engine."""
