"""Blueprint packages for the WealthWise JSON API."""
