"""Command-line utilities for EduWise."""
