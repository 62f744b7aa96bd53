"""School Attendance package.

Organized by feature modules (students, subjects, attendance, reports, settings)
with a thin Flask JSON controller layer over service/repository layers.
"""
