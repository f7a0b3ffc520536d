"""Package data: the bundled build template."""
