"""
Endpoint resolution for the LeanCloud REST API
"""

from typing import NamedTuple

API_HOST_TEMPLATE = "https://{app_id}.api.lncldglobal.com"
API_VERSION = "1.1"


class Endpoints(NamedTuple):
    """Absolute URLs derived from an application id and a table name"""
    collection: str
    search: str
    batch: str

    def object_url(self, object_id: str) -> str:
        """URL of a single stored object"""
        return f"{self.collection}/{object_id}"


def class_path(table_name: str) -> str:
    """Server-relative path of a table, as used inside batch sub-requests"""
    return f"/{API_VERSION}/classes/{table_name}"


def object_path(table_name: str, object_id: str) -> str:
    """Server-relative path of a single object"""
    return f"{class_path(table_name)}/{object_id}"


def resolve_endpoints(app_id: str, table_name: str) -> Endpoints:
    """
    Build the collection, search and batch endpoints

    Args:
        app_id: LeanCloud application id (becomes the host prefix)
        table_name: Class (table) name

    Returns:
        Endpoints tuple

    Example:
        >>> resolve_endpoints("abc", "Books").batch
        'https://abc.api.lncldglobal.com/1.1/batch'
    """
    host = API_HOST_TEMPLATE.format(app_id=app_id)
    return Endpoints(
        collection=f"{host}{class_path(table_name)}",
        search=f"{host}/{API_VERSION}/search/select?clazz={table_name}",
        batch=f"{host}/{API_VERSION}/batch",
    )
