"""Attendance Workflow package.

Feature modules (attendance, schedules, reasons, approvals, notifications)
with a thin Flask JSON controller layer over service/repository layers.
"""
