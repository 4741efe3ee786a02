"""Resources, repositories and exception mappers discovered by scanning in tests."""
