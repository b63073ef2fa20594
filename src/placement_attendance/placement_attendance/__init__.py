"""Placement Attendance package.

Attendance tracking and approval engine for student industrial placements,
organized by feature modules (attendance, absences, approvals, analytics, ...)
with a thin Flask controller layer over service/repository layers.
"""
