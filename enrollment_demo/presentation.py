"""Console rendering of enrollment views"""

import sys
from typing import Iterable, List, TextIO

from .models import EnrollmentView

SEPARATOR = "-----------------------"


def format_enrollment(view: EnrollmentView) -> List[str]:
    student = view.student
    course = view.course
    return [
        f"{view.kind.upper()} ENROLLMENT:",
        f"Student: {student.student_id} - {student.name}",
        f"Course: {course.course_code} - {course.course_name} ({course.credits} credits)",
        f"Enrolled: {view.enrollment_date:%Y-%m-%d %H:%M:%S}",
    ]


def print_enrollments(views: Iterable[EnrollmentView], out: TextIO = None):
    out = out or sys.stdout
    print("ALL ENROLLMENTS:", file=out)
    for view in views:
        for line in format_enrollment(view):
            print(line, file=out)
        print(SEPARATOR, file=out)
