"""Snapgram: photo sharing with a live feed."""
