"""Campus Match web layer."""
