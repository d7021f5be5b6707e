"""Report routes for the Projects Tracker.

This module provides routes for generating printable reports and
exporting data. The JSON report, the HTML preview, the print page and
the CSV export are all built from the same Report object.
Routes call the service layer; they handle HTTP concerns only.
"""
from flask import Blueprint, Response, jsonify, render_template, request

from project_tracker.services import report_service
from project_tracker.services.project_service import get_repository

reports_bp = Blueprint('reports', __name__)


def _config_args() -> dict:
    """Collect report options from the query string.

    selectedColumns may be repeated or comma-separated.

    Returns:
        Plain dict suitable for ReportConfig.from_mapping.
    """
    args = request.args.to_dict()
    columns = request.args.getlist('selectedColumns')
    if len(columns) > 1:
        args['selectedColumns'] = columns
    return args


def _build_report(args) -> report_service.Report:
    config = report_service.ReportConfig.from_mapping(args)
    return report_service.build_report(get_repository().all(), config)


@reports_bp.route('/api/reports/columns')
def report_columns():
    """Column catalog and option lists for the report builder.

    Returns:
        JSON with the 17 columns and the default selection.
    """
    return jsonify({
        'columns': report_service.get_available_columns(),
        'defaultColumns': list(report_service.DEFAULT_COLUMNS),
        'pageSizes': list(report_service.PAGE_SIZES),
        'pageStyles': list(report_service.PAGE_STYLES),
        'fontSizes': list(report_service.FONT_SIZES),
    })


@reports_bp.route('/api/reports', methods=['POST'])
def report_data():
    """Compute a report from a JSON configuration.

    Request Body (JSON):
        pageStyle, pageSize, fontSize, designStatus, district, lac,
        asDateFrom, asDateTo, groupBy, selectedColumns, sortBy,
        sortOrder. All optional.

    Returns:
        JSON report, or 400 on an invalid option.
    """
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    elif not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    try:
        report = _build_report(data)
    except report_service.ReportConfigError as e:
        return jsonify({'error': str(e)}), 400
    return jsonify({'data': report.to_dict()})


def _render(mode: str):
    try:
        report = _build_report(_config_args())
    except report_service.ReportConfigError as e:
        return jsonify({'error': str(e)}), 400
    return render_template(
        'reports/report.html',
        report=report,
        mode=mode,
        no_matches_text=report_service.NO_MATCHES_TEXT,
    )


@reports_bp.route('/reports/preview')
def preview_report():
    """Render the on-screen preview (page-sized blocks, page chrome).

    Accepts the report options as query parameters.
    """
    return _render('preview')


@reports_bp.route('/reports/print')
def print_report():
    """Render the print version, sized for print-to-PDF.

    Accepts the report options as query parameters.
    """
    return _render('print')


@reports_bp.route('/reports/export')
def export_csv():
    """Export the report rows to a CSV file.

    Accepts the report options as query parameters.

    Returns:
        CSV file download of the projected report rows.
    """
    try:
        report = _build_report(_config_args())
    except report_service.ReportConfigError as e:
        return jsonify({'error': str(e)}), 400

    csv_content = report_service.export_report_csv(report)

    # Create response with appropriate headers for CSV download
    response = Response(
        csv_content,
        mimetype='text/csv; charset=utf-8',
    )
    response.headers['Content-Disposition'] = 'attachment; filename=projects_report.csv'

    return response
