"""Services: record store, progress aggregation, lesson sessions, dashboard."""
