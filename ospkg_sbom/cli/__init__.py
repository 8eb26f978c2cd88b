"""Command-line interface for ospkg-sbom."""
