"""Text preprocessing applied to corpus fields before searching and tagging."""
