# apps/core/forms.py

from django import forms
from django.core.exceptions import ValidationError

from .models import EMAIL_PATTERN, Project, normalize_email, validate_email_format
from .utils import parse_date_value

EMAIL_MAX_LENGTH = 254


class StringField(forms.CharField):
    """
    CharField for JSON payloads

    CharField would turn lists, objects and numbers into their repr;
    here anything but a string is rejected.
    """

    default_error_messages = {
        'invalid_type': 'Value must be a string',
    }

    def to_python(self, value):
        if value not in self.empty_values and not isinstance(value, str):
            raise ValidationError(self.error_messages['invalid_type'], code='invalid_type')
        return super().to_python(value)


class RegisterForm(forms.Form):
    """Account creation payload"""

    email = StringField(
        max_length=EMAIL_MAX_LENGTH,
        validators=[validate_email_format],
        error_messages={
            'required': 'Email is required',
            'invalid_type': 'Please provide a valid email',
        },
    )
    password = StringField(
        min_length=6,
        strip=False,
        error_messages={
            'required': 'Password is required',
            'min_length': 'Password must be at least 6 characters',
            'invalid_type': 'Password must be a string',
        },
    )
    name = StringField(
        max_length=150,
        error_messages={
            'required': 'Name is required',
            'invalid_type': 'Name must be a string',
        },
    )

    def clean_email(self):
        return normalize_email(self.cleaned_data.get('email'))


class LoginForm(forms.Form):
    """Credentials payload"""

    email = StringField(max_length=EMAIL_MAX_LENGTH, error_messages={'invalid_type': 'Please provide a valid email'})
    password = StringField(strip=False, error_messages={'invalid_type': 'Password must be a string'})

    def clean_email(self):
        return normalize_email(self.cleaned_data.get('email'))


class AssigneeListField(forms.Field):
    """
    List of assignee emails

    Accepts a JSON array or a comma separated string; blanks are dropped.
    """

    default_error_messages = {
        'invalid_list': 'Assignees must be a list of email addresses',
        'invalid_email': 'All assignees must be valid email addresses',
    }

    def to_python(self, value):
        if value in self.empty_values:
            return []
        if isinstance(value, str):
            value = value.split(',')
        if not isinstance(value, (list, tuple)):
            raise ValidationError(self.error_messages['invalid_list'], code='invalid_list')
        if not all(isinstance(email, str) for email in value):
            raise ValidationError(self.error_messages['invalid_list'], code='invalid_list')
        return [email.strip() for email in value if email.strip()]

    def validate(self, value):
        super().validate(value)
        for email in value:
            if len(email) > EMAIL_MAX_LENGTH or not EMAIL_PATTERN.match(email):
                raise ValidationError(self.error_messages['invalid_email'], code='invalid_email')


class DueDateField(forms.DateField):
    """Date field that also takes full ISO datetimes"""

    def to_python(self, value):
        try:
            return parse_date_value(value)
        except ValueError:
            raise ValidationError('Due date must be a valid date', code='invalid')


class ProjectForm(forms.Form):
    """
    Create payload for a project

    JSON keys are camelCase; from_payload maps them onto the form fields.
    """

    PAYLOAD_FIELDS = {
        'name': 'name',
        'description': 'description',
        'status': 'status',
        'priority': 'priority',
        'assignees': 'assignees',
        'dueDate': 'due_date',
    }

    name = StringField(
        max_length=200,
        error_messages={
            'required': 'Project name is required',
            'invalid_type': 'Project name must be a string',
        },
    )
    description = StringField(required=False, error_messages={'invalid_type': 'Description must be a string'})
    status = forms.ChoiceField(
        choices=Project.STATUS_CHOICES,
        required=False,
        error_messages={'invalid_choice': 'Status must be one of: Planning, In Progress, Completed'},
    )
    priority = forms.ChoiceField(
        choices=Project.PRIORITY_CHOICES,
        required=False,
        error_messages={'invalid_choice': 'Priority must be one of: High, Medium, Low'},
    )
    assignees = AssigneeListField(required=False)
    due_date = DueDateField(error_messages={'required': 'Due date is required'})

    @classmethod
    def from_payload(cls, payload, **kwargs):
        data = {
            field: payload[key]
            for key, field in cls.PAYLOAD_FIELDS.items()
            if key in payload
        }
        return cls(data=data, **kwargs)

    def save(self, owner):
        """Create the project for owner with defaults filled in"""
        data = self.cleaned_data
        project = Project.objects.create(
            name=data['name'],
            description=data.get('description') or '',
            status=data.get('status') or Project.STATUS_PLANNING,
            priority=data.get('priority') or Project.PRIORITY_MEDIUM,
            due_date=data['due_date'],
            created_by=owner,
        )
        project.set_assignees(data.get('assignees') or [])
        return project


class ProjectUpdateForm(ProjectForm):
    """
    Partial update payload

    name, status, priority and dueDate only overwrite when non-empty;
    description overwrites whenever it is present, assignees whenever they
    are present and not null (an empty list clears them).
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for field in self.fields.values():
            field.required = False

    def save(self, project):
        data = self.cleaned_data
        sent = self.data

        for field in ('name', 'status', 'priority', 'due_date'):
            if data.get(field):
                setattr(project, field, data[field])

        if 'description' in sent:
            project.description = data.get('description') or ''

        project.save()

        if sent.get('assignees') is not None:
            project.set_assignees(data.get('assignees') or [])

        return project
