"""Bundled data files for filedb."""
