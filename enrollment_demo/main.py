# main.py
import os
import sys
import logging
from typing import TextIO

from .db.connection import open_session
from .db.init_collections import SAMPLE_COURSES, SAMPLE_STUDENTS
from .db.session import CatalogSession
from .errors import CatalogError
from .presentation import print_enrollments

logger = logging.getLogger(__name__)

RENAMED_STUDENT = "Johnathan Doe"


def run_demo(session: CatalogSession, out: TextIO = None):
    """Show an embedded copy going stale while the referenced view follows the rename"""
    out = out or sys.stdout

    session.reset()

    student_ids = [session.add_student(s["studentId"], s["name"]) for s in SAMPLE_STUDENTS]
    course_ids = [
        session.add_course(c["courseCode"], c["courseName"], c["credits"])
        for c in SAMPLE_COURSES
    ]

    session.add_embedded_enrollment(student_ids[0], course_ids[0])
    session.add_referenced_enrollment(student_ids[1], course_ids[1])
    session.verify()

    print_enrollments(session.list_enrollments(), out)

    modified = session.update_student_name(student_ids[0], RENAMED_STUDENT)
    print(f"\nUpdated student name: {modified} document(s) modified", file=out)

    print("\nAFTER STUDENT NAME UPDATE:", file=out)
    print_enrollments(session.list_enrollments(), out)


def main() -> int:
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())

    try:
        with open_session() as session:
            run_demo(session)
    except CatalogError as e:
        logger.error(f"❌ Enrollment demo failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
