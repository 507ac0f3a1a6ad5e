# config/urls.py

from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # JSON API
    # The board routes come first so /api/projects/board is not taken for a project id
    path('api/projects/', include('apps.board.urls')),
    path('api/reports/', include('apps.reports.urls')),
    path('api/', include('apps.core.urls')),
]

# Admin titles
admin.site.site_header = 'Mini SaaS Dashboard Admin'
admin.site.site_title = 'Mini SaaS Dashboard'
admin.site.index_title = 'Administration'
