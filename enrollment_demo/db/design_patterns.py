"""
Enrollment Design Patterns
Two ways to relate an enrollment to its student and course in MongoDB
"""

from datetime import datetime
from typing import Any, Dict

from bson import ObjectId

EMBEDDED = "embedded"
REFERENCED = "referenced"
ENROLLMENT_TYPES = (EMBEDDED, REFERENCED)

# =============================================================================
# APPROACH 1: EMBEDDING - one read, but the copy is frozen at enrollment time
# =============================================================================

# ENROLLMENT COLLECTION - With full student/course documents copied in
EMBEDDED_ENROLLMENT_PATTERN = {
    "type": EMBEDDED,
    "student": {"_id": "<ObjectId>", "studentId": "S1001", "name": "John Doe"},
    "course": {
        "_id": "<ObjectId>",
        "courseCode": "CS101",
        "courseName": "Introduction to Programming",
        "credits": 3,
    },
    "enrollmentDate": "2024-01-15T10:30:00Z",
}

# =============================================================================
# APPROACH 2: REFERENCING - lookups on read, always current
# =============================================================================

# ENROLLMENT COLLECTION - Only the ids of the related documents
REFERENCED_ENROLLMENT_PATTERN = {
    "type": REFERENCED,
    "studentId": "<ObjectId of students._id>",
    "courseId": "<ObjectId of courses._id>",
    "enrollmentDate": "2024-01-15T10:30:00Z",
}


def embedded_enrollment(student: Dict[str, Any], course: Dict[str, Any], enrolled_at: datetime) -> Dict[str, Any]:
    """Enrollment document carrying copies of the student and course documents"""
    return {
        "type": EMBEDDED,
        "student": dict(student),
        "course": dict(course),
        "enrollmentDate": enrolled_at,
    }


def referenced_enrollment(student_id: ObjectId, course_id: ObjectId, enrolled_at: datetime) -> Dict[str, Any]:
    """Enrollment document holding only the _id of the student and course"""
    return {
        "type": REFERENCED,
        "studentId": student_id,
        "courseId": course_id,
        "enrollmentDate": enrolled_at,
    }
