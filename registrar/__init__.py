"""
Registrar: course registration with enrollment limits and FIFO waitlists.

Students enroll in courses subject to enrollment caps. Full courses keep an
ordered waitlist, and seats that open up (by a drop or a raised limit) are
handed to waitlisted students in the order they asked.
"""

__version__ = "1.0.0"
__author__ = "Registrar Development Team"
__description__ = "Course registration with enrollment limits and waitlists"
