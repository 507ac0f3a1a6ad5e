# apps/reports/views.py

import csv
import logging
from io import BytesIO

import xlsxwriter
from django.http import HttpResponse
from django.utils import timezone

from apps.core.permissions import api_view, token_required
from apps.core.utils import api_response, filter_projects

from .utils import EXPORT_HEADERS, calculate_summary, project_export_row

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


def _export_queryset(request):
    queryset = request.auth_user.get_accessible_projects()
    queryset = queryset.select_related('created_by').prefetch_related('assignee_set')
    return filter_projects(queryset, request.GET).order_by('-created_at')


@api_view(['GET'])
@token_required
def summary_view(request):
    """
    Counters for the dashboard header
    """
    summary = calculate_summary(request.auth_user.get_accessible_projects())
    summary['generatedAt'] = timezone.now().isoformat()

    return api_response(data={'summary': summary})


@api_view(['GET'])
@token_required
def export_projects_csv(request):
    """
    Exports the caller's projects to CSV
    Same filters as the project list
    """
    projects = _export_queryset(request)

    response = HttpResponse(content_type='text/csv; charset=utf-8')
    response['Content-Disposition'] = 'attachment; filename="projects.csv"'
    response.write('\ufeff')  # BOM so spreadsheets pick UTF-8

    writer = csv.writer(response)
    writer.writerow(EXPORT_HEADERS)

    count = 0
    for project in projects:
        row = project_export_row(project)
        row[5] = row[5].isoformat()
        row[6] = timezone.localtime(row[6]).strftime('%Y-%m-%d %H:%M')
        writer.writerow(row)
        count += 1

    logger.info("CSV export: %s projects for %s", count, request.auth_user.email)
    return response


@api_view(['GET'])
@token_required
def export_projects_excel(request):
    """
    Exports the caller's projects to Excel (XLSX)
    """
    projects = _export_queryset(request)

    output = BytesIO()
    workbook = xlsxwriter.Workbook(output, {'in_memory': True, 'remove_timezone': True})

    header_format = workbook.add_format({
        'bold': True,
        'font_color': 'white',
        'bg_color': '#366092',
        'border': 1
    })
    cell_format = workbook.add_format({'border': 1})
    date_format = workbook.add_format({'num_format': 'yyyy-mm-dd', 'border': 1})
    datetime_format = workbook.add_format({'num_format': 'yyyy-mm-dd hh:mm', 'border': 1})

    sheet = workbook.add_worksheet('Projects')
    for col, header in enumerate(EXPORT_HEADERS):
        sheet.write(0, col, header, header_format)

    row_number = 0
    for row_number, project in enumerate(projects, 1):
        name, description, status, priority, assignees, due_date, created_at = project_export_row(project)
        sheet.write(row_number, 0, name, cell_format)
        sheet.write(row_number, 1, description, cell_format)
        sheet.write(row_number, 2, status, cell_format)
        sheet.write(row_number, 3, priority, cell_format)
        sheet.write(row_number, 4, assignees, cell_format)
        sheet.write_datetime(row_number, 5, due_date, date_format)
        sheet.write_datetime(row_number, 6, timezone.localtime(created_at), datetime_format)

    sheet.set_column(0, 0, 30)
    sheet.set_column(1, 1, 50)
    sheet.set_column(2, 3, 14)
    sheet.set_column(4, 4, 40)
    sheet.set_column(5, 6, 18)
    sheet.freeze_panes(1, 0)

    workbook.close()
    output.seek(0)

    logger.info("Excel export: %s projects for %s", row_number, request.auth_user.email)

    response = HttpResponse(output.read(), content_type=XLSX_CONTENT_TYPE)
    response['Content-Disposition'] = 'attachment; filename="projects.xlsx"'
    return response
