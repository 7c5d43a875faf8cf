import matplotlib

# Charts are never shown during tests.
matplotlib.use("Agg")
