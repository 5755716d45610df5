"""Investment simulator backend: monthly compounding projections over HTTP."""
