"""
MongoDB Collection Initialization
Clears the catalog collections and (re)creates their indexes
"""

import os
import json
import logging
from typing import Dict, List, Any

from pymongo import ASCENDING, TEXT
from pymongo.database import Database
from jsonschema import validate, ValidationError as JsonSchemaValidationError

logger = logging.getLogger(__name__)

STUDENTS = "students"
COURSES = "courses"
ENROLLMENTS = "enrollments"

# =============================================================================
# DATA STRUCTURE CONFIGURATION
# =============================================================================

SCHEMAS_ROOT = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'schemas', '0.0.1')


def load_json_schema(collection_name: str) -> Dict:
    """Load the JSON schema for a collection from the package schemas/0.0.1 directory"""
    collection_to_schema_path = {
        STUDENTS: os.path.join(SCHEMAS_ROOT, 'student', 'student.json'),
        COURSES: os.path.join(SCHEMAS_ROOT, 'course', 'course.json'),
        ENROLLMENTS: os.path.join(SCHEMAS_ROOT, 'enrollment', 'enrollment.json'),
    }

    schema_path = collection_to_schema_path.get(collection_name)
    if not schema_path:
        logger.warning(f"No schema mapping found for collection: {collection_name}")
        return {}

    with open(schema_path, 'r') as f:
        return json.load(f)


JSON_SCHEMAS = {name: load_json_schema(name) for name in (STUDENTS, COURSES, ENROLLMENTS)}

# Collection Schema Definitions
COLLECTIONS_CONFIG = {
    STUDENTS: {
        "indexes": [
            {"fields": [("studentId", ASCENDING)], "unique": True},
            {"fields": [("name", TEXT)], "unique": False},
        ],
    },
    COURSES: {
        "indexes": [
            {"fields": [("courseCode", ASCENDING)], "unique": True},
        ],
    },
    ENROLLMENTS: {
        "indexes": [],
    },
}

# Sample Data Templates
SAMPLE_STUDENTS = [
    {"studentId": "S1001", "name": "John Doe"},
    {"studentId": "S1002", "name": "Jane Smith"},
]

SAMPLE_COURSES = [
    {"courseCode": "CS101", "courseName": "Introduction to Programming", "credits": 3},
    {"courseCode": "MATH201", "courseName": "Calculus", "credits": 4},
]

# =============================================================================
# VALIDATION FUNCTIONS
# =============================================================================

def validate_document(collection_name: str, document: Dict) -> List[str]:
    """
    Validate a document against its collection's JSON schema

    Args:
        collection_name: Name of the collection
        document: Document to validate

    Returns:
        List[str]: Error messages, empty if the document is valid
    """
    schema = JSON_SCHEMAS.get(collection_name)
    if not schema:
        logger.warning(f"No schema found for collection: {collection_name}")
        return []

    try:
        validate(instance=document, schema=schema)
        return []
    except JsonSchemaValidationError as e:
        logger.error(f"Validation error for {collection_name}: {e.message}")
        return [e.message]

# =============================================================================
# INITIALIZATION FUNCTIONS
# =============================================================================

def reset_collections(db: Database):
    """Delete every document in the catalog collections, then create their indexes"""
    logger.info("🗄️  Resetting catalog collections...")

    for collection_name in COLLECTIONS_CONFIG.keys():
        result = db[collection_name].delete_many({})
        logger.info(f"🗑️  Cleared {collection_name}: {result.deleted_count} documents")

    create_indexes(db)


def create_indexes(db: Database):
    """Create collection indexes based on configuration"""
    for collection_name, config in COLLECTIONS_CONFIG.items():
        collection = db[collection_name]

        logger.info(f"📁 Setting up collection: {collection_name}")

        for index_config in config["indexes"]:
            fields = index_config["fields"]
            unique = index_config.get("unique", False)

            index_name = collection.create_index(fields, unique=unique)
            logger.info(f"  ✅ Index created: {index_name}")


def verify_setup(db: Database) -> Dict[str, Any]:
    """Log and return document counts and index names per collection"""
    report = {}

    logger.info("🔍 Verification Results:")

    for collection_name in COLLECTIONS_CONFIG.keys():
        collection = db[collection_name]
        count = collection.count_documents({})
        indexes = list(collection.list_indexes())
        report[collection_name] = {
            "count": count,
            "indexes": [idx['name'] for idx in indexes],
        }

        logger.info(f"  ✅ {collection_name}: {count} documents")
        logger.info(f"     📋 Indexes ({len(indexes)}):")
        for idx in indexes:
            index_info = f"{idx['name']}: {list(idx['key'].keys())}"
            if idx.get('unique'):
                index_info += " (unique)"
            logger.info(f"       - {index_info}")

    return report
