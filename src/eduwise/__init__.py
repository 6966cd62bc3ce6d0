"""EduWise - education platform backend."""
