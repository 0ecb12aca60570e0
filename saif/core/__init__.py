"""
Core business logic for training knowledge and analytics.

This module is framework-agnostic - it doesn't import FastAPI or touch
the file system. Loading the dataset and talking to the workout backend
live in infrastructure.
"""
