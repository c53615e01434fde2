"""HTTP surface of the CMS."""
