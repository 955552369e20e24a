"""Attendance Hub package.

Feature modules (users, attendance, leave, schedules, reports, assistant, ...)
each expose a thin Flask controller over service and repository layers.
"""
