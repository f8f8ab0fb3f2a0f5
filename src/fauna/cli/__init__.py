"""Command-line interface for the Fauna client."""
