"""REST API for the EduWise identity service."""
