"""Operations for apictl."""

from apictl.operations.base import Operation, get_operation_registry, register_operation
from apictl.operations.delete_app import DeleteAppOperation
from apictl.operations.environment import AddEnvOperation, RemoveEnvOperation

# Import all operations to register them
from apictl.operations.export_api import ExportApiOperation
from apictl.operations.export_app import ExportAppOperation
from apictl.operations.import_api import ImportApiOperation
from apictl.operations.import_app import ImportAppOperation
from apictl.operations.list_apis import ListApisOperation
from apictl.operations.list_apps import ListAppsOperation

__all__ = [
    "Operation",
    "register_operation",
    "get_operation_registry",
    "ExportApiOperation",
    "ImportApiOperation",
    "ExportAppOperation",
    "ImportAppOperation",
    "ListApisOperation",
    "ListAppsOperation",
    "DeleteAppOperation",
    "AddEnvOperation",
    "RemoveEnvOperation",
]
