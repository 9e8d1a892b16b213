"""Identity resolution and listing-health core."""
