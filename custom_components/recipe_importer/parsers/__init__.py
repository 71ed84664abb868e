"""Recipe parsers and normalizers."""
