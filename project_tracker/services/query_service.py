"""Filter, sort and group engine for project collections.

Pure functions shared by the interactive list view and the report
pipeline. None of them mutate their input; all are deterministic for
the same input.
"""
import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

from project_tracker.models import ALL_DESIGN_STATUSES, DesignStatus, Project
from project_tracker.models.project import parse_date

SORT_KEYS = [
    'projectName',
    'district',
    'lac',
    'designStatus',
    'asDate',
    'arDate',
    'updatedAt',
]
DEFAULT_SORT_KEY = 'projectName'

SORT_ORDERS = ['asc', 'desc']

GROUP_BY_OPTIONS = ['none', 'designStatus', 'district', 'lac']

UNGROUPED_LABEL = 'All Projects'

_NUMBER_PATTERN = re.compile(r'\d+(?:\.\d*)?|\.\d+')
_NON_NUMERIC = re.compile(r'[^\d.]')


def parse_area(text: Optional[str]) -> Optional[float]:
    """Extract a numeric area from free text such as "15000 sq.m".

    Every character other than digits and '.' is stripped, then the
    leading decimal number is taken. Units are neither validated nor
    converted, so "800 sq.m" and "800 sq ft" both yield 800.0.

    Args:
        text: Free-text area value.

    Returns:
        The parsed number, or None if there is none.
    """
    if not text:
        return None
    match = _NUMBER_PATTERN.match(_NON_NUMERIC.sub('', text))
    if not match:
        return None
    return float(match.group())


def _text_arg(args, key: str) -> str:
    value = args.get(key)
    if value is None:
        return ''
    if not isinstance(value, str):
        raise ValueError(f"Invalid {key}: expected a string, got {type(value).__name__}")
    return value.strip()


def _parse_number(value) -> Optional[float]:
    if value is None or value == '':
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid number: {value!r}") from None


@dataclass
class FilterConfig:
    """Declarative filter settings; empty/None fields are not applied."""
    design_status: str = ''
    district: str = ''
    lac: str = ''
    as_date_from: Optional[date] = None
    as_date_to: Optional[date] = None
    area_min: Optional[float] = None
    area_max: Optional[float] = None

    @classmethod
    def from_mapping(cls, args) -> 'FilterConfig':
        """Build a config from request args or a JSON body.

        Recognised keys: designStatus, district, lac, asDateFrom,
        asDateTo, arAreaMin, arAreaMax. Empty strings mean "not set".

        Raises:
            ValueError: On a malformed date or number, or an unknown
                design status.
        """
        design_status = _text_arg(args, 'designStatus')
        if design_status:
            # Normalise names/labels to the stored code
            design_status = DesignStatus.parse(design_status).code
        return cls(
            design_status=design_status,
            district=_text_arg(args, 'district'),
            lac=_text_arg(args, 'lac'),
            as_date_from=parse_date(args.get('asDateFrom')),
            as_date_to=parse_date(args.get('asDateTo')),
            area_min=_parse_number(args.get('arAreaMin')),
            area_max=_parse_number(args.get('arAreaMax')),
        )

    def is_empty(self) -> bool:
        return not (
            self.design_status or self.district or self.lac
            or self.as_date_from or self.as_date_to
            or self.area_min is not None or self.area_max is not None
        )

    def to_dict(self) -> dict:
        return {
            'designStatus': self.design_status,
            'district': self.district,
            'lac': self.lac,
            'asDateFrom': self.as_date_from.isoformat() if self.as_date_from else '',
            'asDateTo': self.as_date_to.isoformat() if self.as_date_to else '',
            'arAreaMin': '' if self.area_min is None else self.area_min,
            'arAreaMax': '' if self.area_max is None else self.area_max,
        }


def _matches(project: Project, config: FilterConfig) -> bool:
    if config.design_status and project.design_status.code != config.design_status:
        return False
    if config.district and project.district != config.district:
        return False
    if config.lac and project.lac != config.lac:
        return False

    as_date = project.as_details.date
    if as_date is not None:
        if config.as_date_from and as_date < config.as_date_from:
            return False
        if config.as_date_to and as_date > config.as_date_to:
            return False

    if config.area_min is not None or config.area_max is not None:
        area = parse_area(project.ar_details.total_area)
        if area is not None:
            if config.area_min is not None and area < config.area_min:
                return False
            if config.area_max is not None and area > config.area_max:
                return False

    return True


def filter_projects(projects: list[Project], config: Optional[FilterConfig] = None) -> list[Project]:
    """Keep the projects that satisfy every supplied predicate.

    Exact matches apply to design status, district and LAC. The AS date
    range is inclusive and never excludes a project without an AS date;
    the area range never excludes a project whose area is missing or
    not numeric.

    Args:
        projects: Input collection.
        config: Filter settings. None means no filtering.

    Returns:
        New list with the matching projects in input order.
    """
    if config is None:
        return list(projects)
    return [p for p in projects if _matches(p, config)]


def _sort_value(project: Project, sort_by: str):
    if sort_by == 'district':
        return project.district
    if sort_by == 'lac':
        return project.lac
    if sort_by == 'designStatus':
        return project.design_status.ordinal
    if sort_by == 'asDate':
        d = project.as_details.date
        return (d is not None, d or date.min)
    if sort_by == 'arDate':
        d = project.ar_details.date
        return (d is not None, d or date.min)
    if sort_by == 'updatedAt':
        return project.updated_at.timestamp()
    return project.project_name


def sort_projects(projects: list[Project], sort_by: str = DEFAULT_SORT_KEY,
                  sort_order: str = 'asc') -> list[Project]:
    """Order projects by one key.

    Strings compare lexicographically, design status by its ordinal,
    dates chronologically with missing dates first, and updatedAt by
    timestamp. Unknown keys fall back to the project name. The sort is
    stable in both directions: equal keys keep their input order.

    Args:
        projects: Input collection.
        sort_by: One of SORT_KEYS.
        sort_order: 'asc' or 'desc'.

    Returns:
        New sorted list.
    """
    if sort_by not in SORT_KEYS:
        sort_by = DEFAULT_SORT_KEY
    reverse = (sort_order or 'asc').lower() == 'desc'
    return sorted(projects, key=lambda p: _sort_value(p, sort_by), reverse=reverse)


def group_key(project: Project, group_by: str) -> str:
    """Return the bucket name of a project for group_by."""
    if group_by == 'designStatus':
        return project.design_status.label
    if group_by == 'district':
        return project.district
    if group_by == 'lac':
        return project.lac
    return UNGROUPED_LABEL


def group_projects(projects: list[Project], group_by: str = 'none') -> dict[str, list[Project]]:
    """Partition an ordered sequence into named buckets.

    Buckets appear in the order their first member appears; members keep
    their relative order. With group_by 'none' everything lands in a
    single "All Projects" bucket (absent for empty input).

    Args:
        projects: Sorted input collection.
        group_by: One of GROUP_BY_OPTIONS.

    Returns:
        Insertion-ordered dict of group name -> projects.
    """
    groups: dict[str, list[Project]] = {}
    for project in projects:
        groups.setdefault(group_key(project, group_by), []).append(project)
    return groups


def query_projects(projects: list[Project], filters: Optional[FilterConfig] = None,
                   sort_by: str = DEFAULT_SORT_KEY, sort_order: str = 'asc',
                   group_by: str = 'none') -> dict[str, list[Project]]:
    """Run filter, sort and group in sequence."""
    ordered = sort_projects(filter_projects(projects, filters), sort_by, sort_order)
    return group_projects(ordered, group_by)


@dataclass
class StatusCount:
    """Bar of the design status chart."""
    status: str
    label: str
    count: int
    color: str

    def to_dict(self) -> dict:
        return {
            'status': self.status,
            'label': self.label,
            'count': self.count,
            'color': self.color,
        }


def status_counts(projects: list[Project]) -> list[StatusCount]:
    """Count projects per design status, one entry per status in order."""
    counts = {status: 0 for status in ALL_DESIGN_STATUSES}
    for project in projects:
        counts[project.design_status] += 1
    return [
        StatusCount(status=s.code, label=s.label, count=counts[s], color=s.color)
        for s in ALL_DESIGN_STATUSES
    ]
