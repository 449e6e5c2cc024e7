"""Generic helpers: bounded cache and terminal detection."""
