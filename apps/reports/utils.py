# apps/reports/utils.py

from datetime import date, timedelta
from typing import Dict, List, Optional

from django.conf import settings
from django.db.models import Case, Count, IntegerField, Value, When
from django.utils import timezone

from apps.core.models import Project

EXPORT_HEADERS = ['Name', 'Description', 'Status', 'Priority', 'Assignees', 'Due Date', 'Created At']


def _priority_rank():
    """Orders High before Medium before Low"""
    return Case(
        *[When(priority=priority, then=Value(rank)) for priority, rank in Project.PRIORITY_RANK.items()],
        default=Value(len(Project.PRIORITY_RANK)),
        output_field=IntegerField(),
    )


def _count_by(queryset, field: str, choices) -> Dict[str, int]:
    counts = {value: 0 for value, _ in choices}
    for row in queryset.order_by().values(field).annotate(total=Count('id')):
        counts[row[field]] = row['total']
    return counts


def calculate_summary(queryset, today: Optional[date] = None) -> Dict:
    """
    Dashboard counters over a project queryset

    Overdue and due-soon only look at open (not Completed) projects.
    """
    today = today or timezone.localdate()
    due_soon_limit = today + timedelta(days=settings.DASHBOARD_DUE_SOON_DAYS)

    open_projects = queryset.exclude(status=Project.STATUS_COMPLETED)

    urgent = (
        open_projects
        .select_related('created_by')
        .prefetch_related('assignee_set')
        .annotate(priority_rank=_priority_rank())
        .order_by('due_date', 'priority_rank', '-created_at')[:settings.DASHBOARD_URGENT_LIMIT]
    )

    return {
        'total': queryset.count(),
        'byStatus': _count_by(queryset, 'status', Project.STATUS_CHOICES),
        'byPriority': _count_by(queryset, 'priority', Project.PRIORITY_CHOICES),
        'overdue': open_projects.filter(due_date__lt=today).count(),
        'dueSoon': open_projects.filter(due_date__gte=today, due_date__lte=due_soon_limit).count(),
        'urgent': [project.to_dict() for project in urgent],
    }


def project_export_row(project: Project) -> List:
    """One export line; dates stay date objects, callers format them"""
    return [
        project.name,
        project.description,
        project.status,
        project.priority,
        ', '.join(project.assignees),
        project.due_date,
        project.created_at,
    ]
