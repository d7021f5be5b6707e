"""Business logic services package.

This package contains service modules that implement business logic.
Routes call services; services interact with models and storage.
This separation keeps routes thin and logic testable.
"""
from project_tracker.services.cloud_service import (
    CloudSync,
    CloudSyncError,
    RemoteCollection,
    SyncInProgressError,
    get_cloud_sync,
)
from project_tracker.services.project_service import (
    ProjectRepository,
    clean_history,
    get_repository,
    parse_project_fields,
    prepare_update,
    reconcile_lac,
    validate_project_input,
)
from project_tracker.services.query_service import (
    FilterConfig,
    filter_projects,
    group_projects,
    parse_area,
    query_projects,
    sort_projects,
    status_counts,
)
from project_tracker.services.report_service import (
    ReportConfig,
    ReportConfigError,
    build_report,
    export_report_csv,
    get_available_columns,
)
from project_tracker.services.storage_service import LocalStore

__all__ = [
    # Storage
    'LocalStore',
    # Cloud sync
    'CloudSync',
    'CloudSyncError',
    'RemoteCollection',
    'SyncInProgressError',
    'get_cloud_sync',
    # Project service
    'ProjectRepository',
    'clean_history',
    'get_repository',
    'parse_project_fields',
    'prepare_update',
    'reconcile_lac',
    'validate_project_input',
    # Query engine
    'FilterConfig',
    'filter_projects',
    'group_projects',
    'parse_area',
    'query_projects',
    'sort_projects',
    'status_counts',
    # Report service
    'ReportConfig',
    'ReportConfigError',
    'build_report',
    'export_report_csv',
    'get_available_columns',
]
