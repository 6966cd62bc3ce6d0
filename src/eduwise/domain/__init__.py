"""Domain layer of the EduWise application shell."""
