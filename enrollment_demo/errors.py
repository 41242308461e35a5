"""Error kinds raised by the catalog session"""


class CatalogError(Exception):
    """Base class for all catalog errors"""


class StoreUnavailable(CatalogError):
    """MongoDB could not be reached or rejected an operation"""


class DuplicateKey(CatalogError):
    def __init__(self, collection: str, field: str, value):
        self.collection = collection
        self.field = field
        self.value = value
        super().__init__(f"Duplicate {field} in {collection}: {value!r}")


class RecordNotFound(CatalogError):
    def __init__(self, collection: str, record_id):
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"Record not found in {collection}: {record_id}")


class ValidationError(CatalogError):
    """A caller supplied value breaks a documented precondition"""
