# apps/core/views.py

import logging

from django.core.cache import cache
from django.core.exceptions import ValidationError
from django.db import connection, transaction
from django.http import JsonResponse
from django.utils import timezone

from apps.board.events import broadcast_project_event

from .auth_service import AuthenticationFailed, UserAlreadyExists, auth_service
from .forms import LoginForm, ProjectForm, ProjectUpdateForm, RegisterForm
from .models import Project, User
from .permissions import DashboardPermissions, api_view, token_required
from .utils import (
    api_error,
    api_response,
    filter_projects,
    first_error,
    get_page_params,
    paginate,
    parse_json_body,
)

logger = logging.getLogger(__name__)


# === AUTHENTICATION ===

@api_view(['POST'])
def register_view(request):
    """
    Register a new account and log it in right away

    The service hashes the password and checks uniqueness; the view only
    validates the payload and shapes the response.
    """
    payload = parse_json_body(request)

    if not all(payload.get(field) for field in ('email', 'password', 'name')):
        return api_error('Please provide email, password, and name', status=400)

    form = RegisterForm(data=payload)
    if not form.is_valid():
        return api_error(first_error(form), status=400)

    try:
        user = auth_service.register_user(**form.cleaned_data)
    except UserAlreadyExists as e:
        return api_error(str(e), status=409)

    token = auth_service.issue_token(user)

    return api_response(
        data={'token': token, 'user': user.to_public_dict()},
        message='User registered successfully',
        status=201,
    )


@api_view(['POST'])
def login_view(request):
    """Exchange email and password for a bearer token"""
    payload = parse_json_body(request)

    if not payload.get('email') or not payload.get('password'):
        return api_error('Please provide email and password', status=400)

    form = LoginForm(data=payload)
    if not form.is_valid():
        return api_error(first_error(form), status=400)

    try:
        token, user = auth_service.login(form.cleaned_data['email'], form.cleaned_data['password'])
    except AuthenticationFailed as e:
        return api_error(str(e), status=401)

    return api_response(
        data={'token': token, 'user': user.to_public_dict()},
        message='Login successful',
    )


@api_view(['GET'])
@token_required(user_must_exist=False)
def me_view(request):
    """Current user behind the token"""
    if request.auth_user is None:
        return api_error('User not found', status=404)

    return api_response(data={'user': request.auth_user.to_public_dict()})


# === USERS ===

@api_view(['GET'])
@token_required
def users_view(request):
    """All users, for the assignee picker"""
    users = User.objects.all().order_by('name', 'email')

    return api_response(data={
        'users': [user.to_public_dict(id_key='_id') for user in users]
    })


# === PROJECTS ===

def _owned_projects(user):
    return user.get_accessible_projects().select_related('created_by').prefetch_related('assignee_set')


def _get_owned_project_or_none(user, project_id):
    """
    Project by id if the user owns it

    Unknown, malformed and foreign ids all look the same to the caller.
    """
    try:
        project = _owned_projects(user).get(pk=project_id)
    except (Project.DoesNotExist, ValidationError, ValueError):
        return None

    if not DashboardPermissions.can_view_project(user, project):
        return None
    return project


@api_view(['GET', 'POST'])
@token_required
def projects_view(request):
    """GET lists the caller's projects, POST creates one"""
    if request.method == 'POST':
        return _create_project(request)
    return _list_projects(request)


def _list_projects(request):
    """
    Table view data: filtered, newest first, paginated
    """
    queryset = filter_projects(_owned_projects(request.auth_user), request.GET)
    queryset = queryset.order_by('-created_at')

    page, limit = get_page_params(request.GET)
    projects, meta = paginate(queryset, page, limit)

    return api_response(
        data={'projects': [project.to_dict() for project in projects]},
        **meta
    )


def _create_project(request):
    payload = parse_json_body(request)

    if not payload.get('name') or not payload.get('dueDate'):
        return api_error('Name and due date are required', status=400)

    form = ProjectForm.from_payload(payload)
    if not form.is_valid():
        return api_error(first_error(form), status=400)

    with transaction.atomic():
        project = form.save(owner=request.auth_user)

    project = _owned_projects(request.auth_user).get(pk=project.pk)
    logger.info("Project created: %s by %s", project.pk, request.auth_user.email)
    broadcast_project_event('project_created', project)

    return api_response(
        data={'project': project.to_dict()},
        message='Project created successfully',
        status=201,
    )


@api_view(['GET', 'PUT', 'DELETE'])
@token_required
def project_detail_view(request, project_id):
    """Read, update or delete one of the caller's projects"""
    project = _get_owned_project_or_none(request.auth_user, project_id)
    if project is None:
        return api_error('Project not found', status=404)

    if request.method == 'PUT':
        return _update_project(request, project)
    if request.method == 'DELETE':
        return _delete_project(request, project)

    return api_response(data={'project': project.to_dict()})


def _update_project(request, project):
    if not DashboardPermissions.can_edit_project(request.auth_user, project):
        return api_error('Project not found', status=404)

    payload = parse_json_body(request)

    form = ProjectUpdateForm.from_payload(payload)
    if not form.is_valid():
        return api_error(first_error(form), status=400)

    with transaction.atomic():
        form.save(project)

    project = _owned_projects(request.auth_user).get(pk=project.pk)
    logger.info("Project updated: %s by %s", project.pk, request.auth_user.email)
    broadcast_project_event('project_updated', project)

    return api_response(
        data={'project': project.to_dict()},
        message='Project updated successfully',
    )


def _delete_project(request, project):
    if not DashboardPermissions.can_delete_project(request.auth_user, project):
        return api_error('Project not found', status=404)

    project_id = str(project.pk)
    owner_id = project.created_by_id
    project.delete()

    logger.info("Project deleted: %s by %s", project_id, request.auth_user.email)
    broadcast_project_event('project_deleted', project_id=project_id, owner_id=owner_id)

    return api_response(message='Project deleted successfully')


# === MONITORING ===

@api_view(['GET'])
def health_check(request):
    """
    Health check for monitoring

    Public on purpose: load balancers call it without a token.
    """
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
            cursor.fetchone()
        tables = sorted(connection.introspection.table_names())

        db_settings = connection.settings_dict
        database = {
            'connected': True,
            'vendor': connection.vendor,
            'name': str(db_settings.get('NAME') or 'unknown'),
            'host': db_settings.get('HOST') or 'localhost',
            'port': db_settings.get('PORT') or None,
            'tables': tables,
        }
    except Exception as e:
        logger.error("Health check failed: %s", e)
        return JsonResponse({
            'success': False,
            'status': 'unhealthy',
            'error': str(e) or 'Database connection failed',
            'timestamp': timezone.now().isoformat(),
        }, status=503)

    try:
        cache.set('health_check', 'ok', 60)
        cache_status = 'ok' if cache.get('health_check') == 'ok' else 'unavailable'
    except Exception as e:
        logger.warning("Health check cache probe failed: %s", e)
        cache_status = 'unavailable'

    return JsonResponse({
        'success': True,
        'status': 'healthy',
        'database': database,
        'cache': cache_status,
        'timestamp': timezone.now().isoformat(),
    })
