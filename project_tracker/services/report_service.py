"""Report service for printable project reports and CSV exports.

This module turns a ReportConfig into a Report: the projects are run
through the filter/sort/group engine, projected onto the selected
columns, and laid out with header groups and page geometry. The HTML
preview, the print rendering and the CSV export all consume the same
Report object.
"""
import csv
import io
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional, Union

from project_tracker.models import Project, is_valid_lac
from project_tracker.services.query_service import (
    DEFAULT_SORT_KEY,
    GROUP_BY_OPTIONS,
    SORT_KEYS,
    SORT_ORDERS,
    FilterConfig,
    filter_projects,
    group_projects,
    sort_projects,
)

PLACEHOLDER = '-'
NO_MATCHES_TEXT = 'No projects match the selected filters.'

PAGE_STYLES = ['portrait', 'landscape']

# Portrait (width, height) in millimetres
PAGE_SIZES = {
    'A4': (210, 297),
    'A3': (297, 420),
}

PAGE_MARGIN_MM = 20

FONT_SIZES = {
    'small': '12px',
    'medium': '14px',
    'large': '16px',
}

AS_GROUP = 'AS Details'
AR_GROUP = 'AR Details'


@dataclass(frozen=True)
class Column:
    """A report column definition."""
    id: str
    label: str
    width: str
    group: Optional[str] = None


# Column catalog (order matters: it is the order offered to users)
COLUMNS = [
    Column('projectName', 'Project Name', '12%'),
    Column('district', 'District', '6%'),
    Column('lac', 'LAC', '6%'),
    Column('designStatus', 'Design Status', '8%'),
    Column('asStatus', 'AS Status', '6%', AS_GROUP),
    Column('asNumber', 'AS Number', '6%', AS_GROUP),
    Column('asDate', 'AS Date', '6%', AS_GROUP),
    Column('arStatus', 'AR Status', '6%', AR_GROUP),
    Column('arNumber', 'AR Number', '6%', AR_GROUP),
    Column('arDate', 'AR Date', '6%', AR_GROUP),
    Column('arFloors', 'No. of Floors', '4%', AR_GROUP),
    Column('arArea', 'Total Area', '6%', AR_GROUP),
    Column('aeeName', 'AEE Name', '8%'),
    Column('aeePhone', 'AEE Phone', '7%'),
    Column('contractorName', 'Contractor', '10%'),
    Column('updatedAt', 'Last Updated', '7%'),
    Column('projectHistory', 'Project History', '20%'),
]

COLUMNS_BY_ID = {column.id: column for column in COLUMNS}

DEFAULT_COLUMNS = ['projectName', 'district', 'lac', 'designStatus', 'asDate', 'arDate']

SERIAL_WIDTH = '3%'


class ReportConfigError(ValueError):
    """Raised for an unrecognised report option."""


def format_date(value: Union[date, datetime, None]) -> str:
    """Format a date as DD-MM-YYYY, or the placeholder when unset."""
    if value is None:
        return PLACEHOLDER
    return value.strftime('%d-%m-%Y')


def _choice(args, key: str, options, default: str) -> str:
    value = args.get(key) or default
    if not isinstance(value, str) or value not in options:
        raise ReportConfigError(f"Invalid {key}: {value}. Must be one of: {list(options)}")
    return value


def _column_list(value) -> list[str]:
    if value is None or value == '':
        return list(DEFAULT_COLUMNS)
    if isinstance(value, str):
        value = [v.strip() for v in value.split(',') if v.strip()]
    elif not isinstance(value, list):
        raise ReportConfigError(f"Invalid selectedColumns: {value!r}")
    columns = []
    for column_id in value:
        if not isinstance(column_id, str) or column_id not in COLUMNS_BY_ID:
            raise ReportConfigError(
                f"Invalid column: {column_id}. Must be one of: {list(COLUMNS_BY_ID)}"
            )
        if column_id not in columns:
            columns.append(column_id)
    return columns


@dataclass
class ReportConfig:
    """Print/export configuration.

    Attributes:
        page_style: 'portrait' or 'landscape'.
        page_size: 'A4' or 'A3'.
        font_size: 'small', 'medium' or 'large'.
        filters: Filters applied before sorting.
        group_by: 'none', 'designStatus', 'district' or 'lac'.
        selected_columns: Ordered column ids from the catalog.
        sort_by: Sort key (see query_service.SORT_KEYS).
        sort_order: 'asc' or 'desc'.
    """
    page_style: str = 'landscape'
    page_size: str = 'A4'
    font_size: str = 'small'
    filters: FilterConfig = field(default_factory=FilterConfig)
    group_by: str = 'none'
    selected_columns: list[str] = field(default_factory=lambda: list(DEFAULT_COLUMNS))
    sort_by: str = DEFAULT_SORT_KEY
    sort_order: str = 'asc'

    @classmethod
    def from_mapping(cls, args) -> 'ReportConfig':
        """Build a config from a JSON body or query string args.

        selectedColumns may be a list or a comma-separated string. A lac
        filter outside the chosen district is dropped, as choosing a
        district resets the LAC choice.

        Raises:
            ReportConfigError: On any unrecognised option.
        """
        try:
            filters = FilterConfig.from_mapping(args)
        except ValueError as e:
            raise ReportConfigError(str(e)) from e
        if filters.district and filters.lac and not is_valid_lac(filters.district, filters.lac):
            filters.lac = ''

        sort_by = args.get('sortBy') or DEFAULT_SORT_KEY
        if not isinstance(sort_by, str) or sort_by not in SORT_KEYS:
            raise ReportConfigError(f"Invalid sortBy: {sort_by}. Must be one of: {SORT_KEYS}")

        return cls(
            page_style=_choice(args, 'pageStyle', PAGE_STYLES, 'landscape'),
            page_size=_choice(args, 'pageSize', PAGE_SIZES, 'A4'),
            font_size=_choice(args, 'fontSize', FONT_SIZES, 'small'),
            filters=filters,
            group_by=_choice(args, 'groupBy', GROUP_BY_OPTIONS, 'none'),
            selected_columns=_column_list(args.get('selectedColumns')),
            sort_by=sort_by,
            sort_order=_choice(args, 'sortOrder', SORT_ORDERS, 'asc'),
        )

    def to_dict(self) -> dict:
        result = {
            'pageStyle': self.page_style,
            'pageSize': self.page_size,
            'fontSize': self.font_size,
            'groupBy': self.group_by,
            'selectedColumns': list(self.selected_columns),
            'sortBy': self.sort_by,
            'sortOrder': self.sort_order,
        }
        result.update(self.filters.to_dict())
        return result


@dataclass(frozen=True)
class PageGeometry:
    """Physical page and content area, in millimetres."""
    page_size: str
    page_style: str
    width_mm: int
    height_mm: int
    margin_mm: int = PAGE_MARGIN_MM

    @property
    def content_width_mm(self) -> int:
        return self.width_mm - 2 * self.margin_mm

    @property
    def content_height_mm(self) -> int:
        return self.height_mm - 2 * self.margin_mm

    @property
    def css_size(self) -> str:
        """Value for the CSS @page size property."""
        return f'{self.width_mm}mm {self.height_mm}mm'

    def to_dict(self) -> dict:
        return {
            'pageSize': self.page_size,
            'pageStyle': self.page_style,
            'widthMm': self.width_mm,
            'heightMm': self.height_mm,
            'marginMm': self.margin_mm,
            'contentWidthMm': self.content_width_mm,
            'contentHeightMm': self.content_height_mm,
        }


def page_geometry(page_size: str = 'A4', page_style: str = 'landscape') -> PageGeometry:
    """Resolve page size and orientation to physical dimensions.

    Landscape swaps the portrait width and height.
    """
    width, height = PAGE_SIZES[page_size]
    if page_style == 'landscape':
        width, height = height, width
    return PageGeometry(page_size, page_style, width, height)


# ============================================================================
# Cells and headers
# ============================================================================

@dataclass(frozen=True)
class TextCell:
    """Single display string."""
    text: str
    kind: str = 'text'

    def to_dict(self) -> dict:
        return {'kind': self.kind, 'text': self.text}

    def as_text(self) -> str:
        return self.text


@dataclass(frozen=True)
class LinesCell:
    """Several display lines, one per history entry."""
    lines: tuple
    kind: str = 'lines'

    def to_dict(self) -> dict:
        return {'kind': self.kind, 'lines': list(self.lines)}

    def as_text(self) -> str:
        return '\n'.join(self.lines)


Cell = Union[TextCell, LinesCell]


def _or_placeholder(value: str) -> str:
    return value if value else PLACEHOLDER


def column_value(project: Project, column_id: str) -> Cell:
    """Resolve the display cell of one project for one column."""
    if column_id == 'projectHistory':
        return LinesCell(tuple(
            f'{format_date(entry.date)}: {entry.event}' for entry in project.history
        ))

    as_details = project.as_details
    ar_details = project.ar_details
    contacts = project.contacts
    values = {
        'projectName': project.project_name,
        'district': project.district,
        'lac': project.lac,
        'designStatus': project.design_status.label,
        'asStatus': as_details.status,
        'asNumber': as_details.number,
        'asDate': format_date(as_details.date),
        'arStatus': ar_details.status,
        'arNumber': ar_details.number,
        'arDate': format_date(ar_details.date),
        'arFloors': ar_details.number_of_floors,
        'arArea': ar_details.total_area,
        'aeeName': contacts.aee_name,
        'aeePhone': contacts.aee_phone,
        'contractorName': contacts.contractor_name,
        'updatedAt': format_date(project.updated_at),
    }
    return TextCell(_or_placeholder(values.get(column_id, '')))


@dataclass(frozen=True)
class HeaderCell:
    """One <th> of the report header."""
    label: str
    colspan: int = 1
    rowspan: int = 1
    column_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'label': self.label,
            'colspan': self.colspan,
            'rowspan': self.rowspan,
            'columnId': self.column_id,
        }


def build_header(column_ids: list[str]) -> tuple[list[HeaderCell], list[HeaderCell]]:
    """Lay out the two header rows.

    The serial '#' cell and every ungrouped column span both rows. Each
    run of adjacent columns from the same sub-record (AS or AR) shares a
    super-header spanning the run, with the column labels in row two.

    Args:
        column_ids: Selected column ids in display order.

    Returns:
        (top_row, sub_row)
    """
    top = [HeaderCell('#', rowspan=2)]
    sub = []
    previous_group = None
    for column_id in column_ids:
        column = COLUMNS_BY_ID[column_id]
        if column.group is None:
            top.append(HeaderCell(column.label, rowspan=2, column_id=column.id))
        else:
            if column.group == previous_group:
                last = top[-1]
                top[-1] = HeaderCell(last.label, colspan=last.colspan + 1)
            else:
                top.append(HeaderCell(column.group, colspan=1))
            sub.append(HeaderCell(column.label, column_id=column.id))
        previous_group = column.group
    return top, sub


# ============================================================================
# Report assembly
# ============================================================================

@dataclass
class ReportRow:
    serial: int
    project_id: str
    cells: list

    def to_dict(self) -> dict:
        return {
            'serial': self.serial,
            'projectId': self.project_id,
            'cells': [cell.to_dict() for cell in self.cells],
        }


@dataclass
class ReportGroup:
    name: str
    rows: list[ReportRow]
    show_header: bool

    @property
    def count(self) -> int:
        return len(self.rows)

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'count': self.count,
            'showHeader': self.show_header,
            'rows': [row.to_dict() for row in self.rows],
        }


@dataclass
class Report:
    """Computed report shared by every rendering."""
    config: ReportConfig
    columns: list[Column]
    header_top: list[HeaderCell]
    header_sub: list[HeaderCell]
    groups: list[ReportGroup]
    geometry: PageGeometry
    total: int
    generated_at: datetime

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    @property
    def column_count(self) -> int:
        """Number of table columns including the serial column."""
        return len(self.columns) + 1

    @property
    def font_size(self) -> str:
        return FONT_SIZES[self.config.font_size]

    @property
    def summary(self) -> list[str]:
        """Heading facts: generation date, totals and active filters."""
        items = [
            f'Generated: {format_date(self.generated_at)}',
            f'Total Projects: {self.total}',
        ]
        filters = self.config.filters
        if filters.design_status:
            items.append(f'Status: {filters.design_status}')
        if filters.district:
            items.append(f'District: {filters.district}')
        if filters.lac:
            items.append(f'LAC: {filters.lac}')
        if filters.as_date_from or filters.as_date_to:
            items.append(
                f'AS Date: {format_date(filters.as_date_from)} to {format_date(filters.as_date_to)}'
            )
        if self.config.group_by != 'none':
            items.append(f'Grouped by: {self.config.group_by}')
        return items

    def to_dict(self) -> dict:
        return {
            'config': self.config.to_dict(),
            'columns': [
                {'id': c.id, 'label': c.label, 'width': c.width, 'group': c.group}
                for c in self.columns
            ],
            'header': {
                'top': [cell.to_dict() for cell in self.header_top],
                'sub': [cell.to_dict() for cell in self.header_sub],
            },
            'groups': [group.to_dict() for group in self.groups],
            'geometry': self.geometry.to_dict(),
            'total': self.total,
            'isEmpty': self.is_empty,
            'emptyText': NO_MATCHES_TEXT if self.is_empty else None,
            'summary': self.summary,
            'generatedAt': self.generated_at.isoformat(),
        }


def build_report(projects: list[Project], config: Optional[ReportConfig] = None,
                 now: Optional[datetime] = None) -> Report:
    """Run the report pipeline.

    filter -> sort -> group -> project onto columns -> lay out. Serial
    numbers restart at 1 in each group when grouping is active and run
    continuously otherwise.

    Args:
        projects: The full project collection.
        config: Report settings; defaults when None.
        now: Generation timestamp (defaults to the current time).

    Returns:
        The computed Report.
    """
    config = config or ReportConfig()
    ordered = sort_projects(
        filter_projects(projects, config.filters),
        config.sort_by,
        config.sort_order,
    )
    grouped = group_projects(ordered, config.group_by)
    is_grouped = config.group_by != 'none'

    groups = []
    serial = 0
    for name, members in grouped.items():
        if is_grouped:
            serial = 0
        rows = []
        for project in members:
            serial += 1
            rows.append(ReportRow(
                serial=serial,
                project_id=project.id,
                cells=[column_value(project, c) for c in config.selected_columns],
            ))
        groups.append(ReportGroup(name=name, rows=rows, show_header=is_grouped))

    header_top, header_sub = build_header(config.selected_columns)
    return Report(
        config=config,
        columns=[COLUMNS_BY_ID[c] for c in config.selected_columns],
        header_top=header_top,
        header_sub=header_sub,
        groups=groups,
        geometry=page_geometry(config.page_size, config.page_style),
        total=len(ordered),
        generated_at=now or datetime.now(timezone.utc),
    )


def export_report_csv(report: Report) -> str:
    """Export a computed report to CSV format.

    Columns: '#', 'Group' (only when grouped), then the selected column
    labels. History cells become newline-separated text.

    Args:
        report: Output of build_report.

    Returns:
        CSV-formatted string suitable for file download.
    """
    is_grouped = report.config.group_by != 'none'
    fieldnames = ['#']
    if is_grouped:
        fieldnames.append('Group')
    fieldnames.extend(column.label for column in report.columns)

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(fieldnames)

    for group in report.groups:
        for row in group.rows:
            values = [row.serial]
            if is_grouped:
                values.append(group.name)
            values.extend(cell.as_text() for cell in row.cells)
            writer.writerow(values)

    return output.getvalue()


def get_available_columns() -> list[dict]:
    """Column catalog for populating the report configuration UI."""
    return [
        {'id': c.id, 'label': c.label, 'group': c.group}
        for c in COLUMNS
    ]
