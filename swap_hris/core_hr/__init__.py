"""Core HR module — Employee and Department models and record schemas."""

from swap_hris.core_hr.models import Department, Employee

__all__ = ["Employee", "Department"]
