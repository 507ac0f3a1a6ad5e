# apps/board/views.py

from apps.core.models import Project
from apps.core.permissions import api_view, token_required
from apps.core.utils import api_response, filter_projects

COLUMN_ORDER = [
    Project.STATUS_PLANNING,
    Project.STATUS_IN_PROGRESS,
    Project.STATUS_COMPLETED,
]


def group_by_status(projects):
    """
    Kanban columns in fixed status order

    Every column is present even when empty.
    """
    columns = {status: [] for status in COLUMN_ORDER}
    for project in projects:
        columns[project.status].append(project.to_dict())

    return [
        {'status': status, 'count': len(items), 'projects': items}
        for status, items in columns.items()
    ]


@api_view(['GET'])
@token_required
def board_view(request):
    """
    Kanban data: the caller's projects (list filters apply, no pagination)
    grouped by status
    """
    queryset = request.auth_user.get_accessible_projects()
    queryset = queryset.select_related('created_by').prefetch_related('assignee_set')
    queryset = filter_projects(queryset, request.GET).order_by('due_date', '-created_at')

    projects = list(queryset)

    return api_response(data={
        'columns': group_by_status(projects),
        'total': len(projects),
    })
