"""Business logic: credential issuance and movie collection access."""
