"""Static tables: version groups, ability changes and dex ranges."""
