"""School Attendance package.

Organized by feature modules (attendance, analytics, roster, users)
with a thin Flask controller layer over service/repository layers.
"""
