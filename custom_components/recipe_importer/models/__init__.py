"""Recipe models and extraction schemas."""
