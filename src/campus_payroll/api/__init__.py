"""HTTP API for the campus payroll engine."""
