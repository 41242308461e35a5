"""
Catalog Session
Owns a MongoDB client and the students, courses and enrollments collections
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional

from bson import ObjectId
from pymongo import MongoClient
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..errors import DuplicateKey, RecordNotFound, StoreUnavailable, ValidationError
from ..models import (
    CourseRecord,
    CourseRef,
    EnrollmentRef,
    EnrollmentView,
    StudentRecord,
    StudentRef,
)
from .design_patterns import EMBEDDED, REFERENCED, embedded_enrollment, referenced_enrollment
from .init_collections import (
    COURSES,
    ENROLLMENTS,
    STUDENTS,
    reset_collections,
    validate_document,
    verify_setup,
)

logger = logging.getLogger(__name__)

ON_DANGLING = ("skip", "raise")

# Unique key field per collection, used to report duplicate key errors
UNIQUE_FIELDS = {
    STUDENTS: "studentId",
    COURSES: "courseCode",
}


@contextmanager
def store_errors(action: str):
    """Translate pymongo failures into catalog errors"""
    try:
        yield
    except PyMongoError as e:
        if isinstance(e, DuplicateKeyError):
            raise
        logger.error(f"❌ MongoDB error while trying to {action}: {e}")
        raise StoreUnavailable(f"Could not {action}: {e}") from e


class CatalogSession:
    def __init__(self, client: MongoClient, database_name: str):
        self.client = client
        self.database = client[database_name]
        self.students = self.database[STUDENTS]
        self.courses = self.database[COURSES]
        self.enrollments = self.database[ENROLLMENTS]
        self._closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    def reset(self):
        """Empty all three collections and rebuild their indexes"""
        with store_errors("reset the catalog"):
            reset_collections(self.database)

    def verify(self) -> Dict[str, Any]:
        with store_errors("verify the catalog"):
            return verify_setup(self.database)

    def counts(self) -> Dict[str, int]:
        with store_errors("count documents"):
            return {
                STUDENTS: self.students.count_documents({}),
                COURSES: self.courses.count_documents({}),
                ENROLLMENTS: self.enrollments.count_documents({}),
            }

    # -------------------------------------------------------------------------
    # Inserts
    # -------------------------------------------------------------------------

    def _insert(self, collection_name: str, document: Dict[str, Any]) -> ObjectId:
        errors = validate_document(collection_name, document)
        if errors:
            raise ValidationError(f"Invalid {collection_name} document: {'; '.join(errors)}")

        field = UNIQUE_FIELDS.get(collection_name)
        try:
            with store_errors(f"insert into {collection_name}"):
                result = self.database[collection_name].insert_one(document)
        except DuplicateKeyError as e:
            logger.warning(f"⚠️  Duplicate {field} rejected in {collection_name}: {document.get(field)}")
            raise DuplicateKey(collection_name, field, document.get(field)) from e

        return result.inserted_id

    def add_student(self, student_id: str, name: str) -> StudentRef:
        student = StudentRecord.build(student_id=student_id, name=name)
        inserted_id = self._insert(STUDENTS, student.to_document())
        logger.info(f"👤 Added student {student_id} ({inserted_id})")
        return StudentRef(inserted_id)

    def add_course(self, course_code: str, course_name: str, credits: int) -> CourseRef:
        course = CourseRecord.build(course_code=course_code, course_name=course_name, credits=credits)
        inserted_id = self._insert(COURSES, course.to_document())
        logger.info(f"📚 Added course {course_code} ({inserted_id})")
        return CourseRef(inserted_id)

    def add_embedded_enrollment(self, student_ref: StudentRef, course_ref: CourseRef) -> EnrollmentRef:
        """Enroll a student, copying the current student and course documents"""
        with store_errors("read enrollment sources"):
            student = self.students.find_one({"_id": student_ref})
            course = self.courses.find_one({"_id": course_ref})

        if student is None:
            raise RecordNotFound(STUDENTS, student_ref)
        if course is None:
            raise RecordNotFound(COURSES, course_ref)

        document = embedded_enrollment(student, course, _now())
        inserted_id = self._insert(ENROLLMENTS, document)
        logger.info(f"📝 Added embedded enrollment {inserted_id}")
        return EnrollmentRef(inserted_id)

    def add_referenced_enrollment(self, student_ref: StudentRef, course_ref: CourseRef) -> EnrollmentRef:
        """Enroll a student by id only; the references are not checked"""
        document = referenced_enrollment(student_ref, course_ref, _now())
        inserted_id = self._insert(ENROLLMENTS, document)
        logger.info(f"📝 Added referenced enrollment {inserted_id}")
        return EnrollmentRef(inserted_id)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_student(self, student_ref: StudentRef) -> Optional[StudentRecord]:
        with store_errors("read student"):
            document = self.students.find_one({"_id": student_ref})
        return StudentRecord.from_document(document) if document else None

    def find_student(self, student_id: str) -> Optional[StudentRecord]:
        with store_errors("read student"):
            document = self.students.find_one({"studentId": student_id})
        return StudentRecord.from_document(document) if document else None

    def get_course(self, course_ref: CourseRef) -> Optional[CourseRecord]:
        with store_errors("read course"):
            document = self.courses.find_one({"_id": course_ref})
        return CourseRecord.from_document(document) if document else None

    def list_enrollments(self, on_dangling: str = "skip") -> Iterator[EnrollmentView]:
        """
        Yield every enrollment with its student and course resolved

        Embedded enrollments come from their stored copies. Referenced ones
        are looked up while iterating, so they reflect the current documents.

        Args:
            on_dangling: "skip" logs and skips a referenced enrollment whose
                student or course is gone; "raise" raises RecordNotFound

        Yields:
            EnrollmentView: One per enrollment, in store order
        """
        if on_dangling not in ON_DANGLING:
            raise ValidationError(f"on_dangling must be one of {ON_DANGLING}, got {on_dangling!r}")

        with store_errors("list enrollments"):
            for enrollment in self.enrollments.find():
                if enrollment.get("type") == EMBEDDED:
                    yield _embedded_view(enrollment)
                    continue

                try:
                    yield self._resolve_referenced(enrollment)
                except RecordNotFound as e:
                    if on_dangling == "raise":
                        raise
                    logger.warning(f"⚠️  Skipping enrollment {enrollment['_id']}: {e}")

    def _resolve_referenced(self, enrollment: Dict[str, Any]) -> EnrollmentView:
        student = self.get_student(enrollment.get("studentId"))
        if student is None:
            raise RecordNotFound(STUDENTS, enrollment.get("studentId"))

        course = self.get_course(enrollment.get("courseId"))
        if course is None:
            raise RecordNotFound(COURSES, enrollment.get("courseId"))

        return EnrollmentView(
            id=enrollment["_id"],
            kind=REFERENCED,
            student=student,
            course=course,
            enrollment_date=enrollment["enrollmentDate"],
        )

    # -------------------------------------------------------------------------
    # Updates
    # -------------------------------------------------------------------------

    def update_student_name(self, student_ref: StudentRef, new_name: str) -> int:
        """Set a student's name; returns the number of documents modified"""
        if not isinstance(new_name, str):
            raise ValidationError(f"Student name must be a string, got {type(new_name).__name__}")

        with store_errors("update student name"):
            result = self.students.update_one(
                {"_id": student_ref},
                {"$set": {"name": new_name}},
            )

        logger.info(f"✏️  Updated student {student_ref}: {result.modified_count} document(s) modified")
        return result.modified_count

    def close(self):
        """Close the MongoDB client; calling it again does nothing"""
        if self._closed:
            return
        self.client.close()
        self._closed = True
        logger.info("🔌 MongoDB connection closed")


def _embedded_view(enrollment: Dict[str, Any]) -> EnrollmentView:
    return EnrollmentView(
        id=enrollment["_id"],
        kind=EMBEDDED,
        student=StudentRecord.from_document(enrollment["student"]),
        course=CourseRecord.from_document(enrollment["course"]),
        enrollment_date=enrollment["enrollmentDate"],
    )


def _now() -> datetime:
    return datetime.now(timezone.utc)
