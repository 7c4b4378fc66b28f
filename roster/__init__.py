"""
Roster: student, course and grade records over HTTP.

A small record-keeping service that stores students, courses and grades in a
document store and serves them back already joined with the names of the
records they reference.
"""

__version__ = "1.0.0"
__author__ = "Roster Development Team"
__description__ = "Student, course and grade record service"
