import os

# charts are written to files only
os.environ.setdefault("MPLBACKEND", "Agg")
