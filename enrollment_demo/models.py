from datetime import datetime
from typing import Any, Dict, Literal, NewType, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError

StudentRef = NewType("StudentRef", ObjectId)
CourseRef = NewType("CourseRef", ObjectId)
EnrollmentRef = NewType("EnrollmentRef", ObjectId)


class _Record(BaseModel):
    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        populate_by_name=True,
        frozen=True,
    )

    id: Optional[ObjectId] = Field(None, alias="_id")

    @classmethod
    def build(cls, **fields):
        """Construct a record, turning pydantic errors into ValidationError"""
        try:
            return cls(**fields)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid {cls.__name__}: {e}") from e

    @classmethod
    def from_document(cls, document: Dict[str, Any]):
        return cls.model_validate(document)

    def to_document(self) -> Dict[str, Any]:
        """MongoDB document using stored field names; omits an unset _id"""
        return self.model_dump(by_alias=True, exclude_none=True)


class StudentRecord(_Record):
    student_id: StrictStr = Field(alias="studentId", min_length=1)
    name: StrictStr


class CourseRecord(_Record):
    course_code: StrictStr = Field(alias="courseCode", min_length=1)
    course_name: StrictStr = Field(alias="courseName")
    credits: StrictInt = Field(gt=0)


class EnrollmentView(BaseModel):
    """An enrollment with its student and course as seen at read time"""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    id: ObjectId
    kind: Literal["embedded", "referenced"]
    student: StudentRecord
    course: CourseRecord
    enrollment_date: datetime
