"""Build-time generator for localized resource bundles."""
