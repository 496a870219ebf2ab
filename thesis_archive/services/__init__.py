"""Business logic for the archive; endpoints stay thin and call into these modules."""
