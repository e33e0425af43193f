"""Attendance-based monthly payroll for campus staff and lecturers."""

__version__ = "1.0.0"
