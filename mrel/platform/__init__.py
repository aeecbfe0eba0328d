"""Platform helpers: subprocess execution and filesystem writes."""
