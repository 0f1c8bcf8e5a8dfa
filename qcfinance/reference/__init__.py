"""Static reference data that is not tied to a tax year."""
