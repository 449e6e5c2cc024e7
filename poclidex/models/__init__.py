"""Display models built from raw records."""
