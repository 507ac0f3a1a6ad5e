# apps/reports/urls.py

from django.urls import path

from . import views

app_name = 'reports'

urlpatterns = [
    # Dashboard metrics
    path('summary', views.summary_view, name='summary'),

    # Exports of the (filtered) project table
    path('projects.csv', views.export_projects_csv, name='projects_csv'),
    path('projects.xlsx', views.export_projects_excel, name='projects_excel'),
]
