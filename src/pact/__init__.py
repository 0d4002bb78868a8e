"""pact: accountability backend API."""
